"""
services/ — Business logic. Routers call into these modules.
"""
