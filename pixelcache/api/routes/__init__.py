from .health import router as health_router
from .images import create_image_router

__all__ = ["health_router", "create_image_router"]
