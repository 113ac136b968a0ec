"""
auth — User authentication module.

Provides:
  • JWT token creation & verification
  • Password hashing (bcrypt)
  • ``AuthService`` (register / login / current user)
  • Register / Login / Me API routes
  • ``get_current_user_id`` FastAPI dependency
"""
