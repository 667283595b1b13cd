"""
Middleware package for the HomeSwift API.
"""

from .validation import ValidationMiddleware

__all__ = ["ValidationMiddleware"]
