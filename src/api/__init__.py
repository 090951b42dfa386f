"""
HTTP API layer: routers, dependencies and error handlers
"""
