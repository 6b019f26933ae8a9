"""
Domain layer: 스키마, 에러, 상수.

I/O 없음. core/app 양쪽에서 import.
"""

from .errors import CatalogError, ErrorCodes
from .schemas import CatalogConfig, FilePart, FormBody, Item

__all__ = ["CatalogError", "ErrorCodes", "CatalogConfig", "FilePart", "FormBody", "Item"]
