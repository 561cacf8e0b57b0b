"""Domain interfaces for dependency inversion."""

from .graph_repository import GraphRepository

__all__ = ["GraphRepository"]
