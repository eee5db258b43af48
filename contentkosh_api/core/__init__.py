"""
Core application utilities.

This package provides:
- Application-level settings (separate from DB settings)
- Typed API errors, logging setup and password/token helpers
- FastAPI dependencies for authentication, role gates and resource access
"""
