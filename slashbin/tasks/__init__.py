"""
Celery Tasks

Background work scheduled by Celery beat.
"""
