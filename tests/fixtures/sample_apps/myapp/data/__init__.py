from .repository import MyRepository

__all__ = ["MyRepository"]
