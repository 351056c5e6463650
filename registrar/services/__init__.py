"""
Services module containing the registrar orchestration layer.
"""

from .registrar import Registrar

__all__ = [
    "Registrar",
]
