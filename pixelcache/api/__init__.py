"""
HTTP Adapter

- **handler.py**: ImageRequestHandler, framework-agnostic (method, query, headers) -> ImageResponse
- **routes/**: FastAPI routers (image route, health)
- **middleware/**: error handling middleware
- **dependencies.py**: app.state providers for routes
"""

from .handler import ImageRequestHandler, error_response

__all__ = ["ImageRequestHandler", "error_response"]
