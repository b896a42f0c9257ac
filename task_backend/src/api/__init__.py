"""
FastAPI Task Backend package.

This module marks the 'src.api' directory as a Python package and exposes
the FastAPI app instance for convenience imports (src.api.app).
"""

from .main import app  # noqa: F401
