"""
FastAPI dependencies.

The optimizer and its request handler are created once (in the lifespan,
or handed to create_app() directly) and stored on app.state; routes get
them through these providers.
"""

from typing import Annotated

from fastapi import Depends, Request

from pixelcache.api.handler import ImageRequestHandler
from pixelcache.core.config.settings import Settings, get_settings
from pixelcache.optimizer.orchestrator import ImageOptimizer


def get_optimizer(request: Request) -> ImageOptimizer:
    """
    Retrieve the ImageOptimizer from application state.

    Raises:
        RuntimeError: If the application has not been started
    """
    optimizer = getattr(request.app.state, "optimizer", None)
    if optimizer is None:
        raise RuntimeError("Image optimizer is not initialized; is the lifespan running?")
    return optimizer


def get_image_handler(request: Request) -> ImageRequestHandler:
    handler = getattr(request.app.state, "image_handler", None)
    if handler is None:
        handler = ImageRequestHandler(get_optimizer(request))
        request.app.state.image_handler = handler
    return handler


SettingsDep = Annotated[Settings, Depends(get_settings)]
OptimizerDep = Annotated[ImageOptimizer, Depends(get_optimizer)]
ImageHandlerDep = Annotated[ImageRequestHandler, Depends(get_image_handler)]
