"""
API package - HTTP layer: routes, dependencies and middleware.
"""
