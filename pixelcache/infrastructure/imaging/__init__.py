from .pillow_engine import PILLOW_FORMATS, PillowTransformEngine

__all__ = ["PillowTransformEngine", "PILLOW_FORMATS"]
