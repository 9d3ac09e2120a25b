"""Middleware — plain async callables wrapped around dispatch."""

from perch.middleware.protocol import Middleware, Next

__all__ = ["Middleware", "Next"]
