"""
Core layer: 파일 저장소 핵심 모듈.

역할:
- 카탈로그 저장소 (config.json, catalog/, images/)
- 원자적 쓰기, config 락
"""

from .catalog import CatalogStore, is_safe_filename
from .storage import atomic_write_json, config_lock, load_json

__all__ = [
    # catalog
    "CatalogStore",
    "is_safe_filename",
    # storage
    "atomic_write_json",
    "config_lock",
    "load_json",
]
