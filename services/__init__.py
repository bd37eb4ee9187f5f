"""
services/ - Business Logic Layer
================================
Orchestrates repositories for the site's pages. No HTML rendering here.
"""
