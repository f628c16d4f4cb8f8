"""Services layer"""

from .api_service import APIService, apply_logging

__all__ = [
    "APIService",
    "apply_logging",
]
