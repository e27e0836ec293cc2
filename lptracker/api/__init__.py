from .positions import router

__all__ = ["router"]
