"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Schemas are grouped by domain module (academics, batch, content, etc.) and also
include the common response envelopes. JSON field names are camelCase.
"""

from .common import ApiResponse, ErrorResponse, ok  # noqa: F401
