"""
HTTP Layer

Web routes for the short-URL surface and the versioned JSON API.
"""
