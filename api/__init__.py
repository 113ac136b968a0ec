"""
api — service-level routes, middleware and exception handlers.
"""
