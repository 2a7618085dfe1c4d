"""
Networking feature package.

Keeps the contact graph slice together: domain models, the connection
path finder, the contacts repository and the HTTP router.
"""
