"""
Demo HTTP service API layer

A FastAPI app exposing /health for the supervised demo service.
"""

from api.main import create_app

__all__ = ["create_app"]
