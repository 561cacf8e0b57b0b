from .graph import graph_router

__all__ = ["graph_router"]
