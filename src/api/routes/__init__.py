"""
API Routes - HTTP endpoint handlers
"""
from . import health

__all__ = ["health"]
