"""
Templates layer: HTML 템플릿 렌더링 모듈.

주의: 폴더 구분
- src/templates/ → 코드 (이 모듈)
- templates/ (루트) → HTML 원본 (catalog.html, detail.html, upload.html)
"""

from .renderer import (
    PLACEHOLDER_PATTERN,
    TemplateError,
    TemplateRenderer,
    detect_placeholders,
    substitute,
)

__all__ = [
    "TemplateRenderer",
    "TemplateError",
    "PLACEHOLDER_PATTERN",
    "detect_placeholders",
    "substitute",
]
