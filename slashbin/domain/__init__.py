"""
Domain Layer

Pure file lifecycle logic: identifiers, content types, upload sessions,
downloads and reclamation. No Flask or Celery imports live here.
"""
