"""
Domain Constants: 카탈로그 전역 상수.

파일명 정책, 경로 상수, MIME 타입 등 시스템 전반에서 사용되는 값들.
"""

import os

# =============================================================================
# Project Layout (프로젝트 루트 기준 기본 경로)
# =============================================================================
# <root>/
# ├── config.json        # {title, itemCount}
# ├── catalog/<id>.json  # 아이템 1개당 파일 1개
# ├── images/<filename>  # 업로드 원본 파일명 그대로
# ├── public/catalog.css
# └── templates/*.html

CONFIG_FILENAME = "config.json"
CATALOG_DIR = "catalog"
IMAGES_DIR = "images"
TEMPLATES_DIR = "templates"
STYLESHEET_PATH = "public/catalog.css"

ITEM_FILE_SUFFIX = ".json"
CONFIG_LOCK_SUFFIX = ".lock"

DEFAULT_TITLE = "Catalog"
DEFAULT_PORT = 3000
DEFAULT_HOST = "127.0.0.1"
DEFAULT_LOCK_TIMEOUT = 10

# =============================================================================
# Templates (templates/ 디렉터리 내 파일명)
# =============================================================================

LIST_TEMPLATE = "catalog.html"
DETAIL_TEMPLATE = "detail.html"
UPLOAD_TEMPLATE = "upload.html"

# =============================================================================
# Upload Form Fields
# =============================================================================

FIELD_ITEM_NAME = "itemName"
FIELD_ITEM_DESCRIPTION = "itemDescription"
FIELD_IMAGE = "image"

# =============================================================================
# MIME Types
# =============================================================================

IMAGE_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".bmp": "image/bmp",
    ".ico": "image/x-icon",
}

IMAGE_EXTENSIONS = tuple(IMAGE_MIME_TYPES)

STYLESHEET_MIME_TYPE = "text/css"


def get_extension(filename: str) -> str:
    """파일명의 확장자 (소문자, 점 포함). 없으면 빈 문자열."""
    return os.path.splitext(filename)[1].lower()


def get_image_mime_type(filename: str) -> str:
    """
    이미지 파일명에서 MIME 타입 추출.

    Args:
        filename: 파일명 (확장자 포함, 대소문자 무관)

    Returns:
        MIME 타입 문자열 (알 수 없으면 octet-stream)
    """
    return IMAGE_MIME_TYPES.get(get_extension(filename), "application/octet-stream")
