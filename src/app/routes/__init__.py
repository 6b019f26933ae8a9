"""
FastAPI Routes.

등록 순서 중요: catalog (고정 경로) → resources (/{resource} 폴백)
"""

from . import catalog, resources

__all__ = ["catalog", "resources"]
