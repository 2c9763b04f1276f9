"""Dashboard REST API routers"""
