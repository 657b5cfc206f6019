from .json_store import JsonWorldRepository

__all__ = ["JsonWorldRepository"]
