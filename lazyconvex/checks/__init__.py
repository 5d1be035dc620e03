from .convex_set import ConvexSetChecks

__all__ = ["ConvexSetChecks"]
