# Path: ban_extractor/core/ui/__init__.py
"""Console interaction for ban_extractor."""

from .progress import IdentifierProgress

__all__ = ['IdentifierProgress']
