"""
Application Services.

역할:
- multipart: multipart/form-data 본문 → FormBody
- pages: 목록/상세 HTML 조립
"""

from .multipart import parse_multipart, parse_multipart_body
from .pages import render_catalog_page, render_detail_page

__all__ = [
    "parse_multipart",
    "parse_multipart_body",
    "render_catalog_page",
    "render_detail_page",
]
