"""
database — ORM models, engine/session factory and user store access.
"""
