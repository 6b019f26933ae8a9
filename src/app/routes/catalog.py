"""
Catalog Routes: 목록 / 업로드 / 헬스 체크.

- GET  /, /catalog, /gallery → 카탈로그 목록 페이지
- POST /, /catalog, /gallery, /upload → 업로드 제출 (multipart)
- GET  /upload → 업로드 폼 (정적 템플릿)
- GET  /health → 헬스 체크
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from src.app.context import CatalogContext, get_context
from src.app.services.multipart import parse_multipart
from src.app.services.pages import render_catalog_page
from src.domain.constants import (
    FIELD_IMAGE,
    FIELD_ITEM_DESCRIPTION,
    FIELD_ITEM_NAME,
    UPLOAD_TEMPLATE,
)
from src.domain.errors import CatalogError, ErrorCodes
from src.domain.schemas import FilePart, FormBody, Item

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Upload
# =============================================================================

def _text_field(form: FormBody, name: str) -> str:
    value = form.get(name, "")
    return value if isinstance(value, str) else ""


def create_item_from_form(context: CatalogContext, form: FormBody) -> Item:
    """
    업로드 폼 → 이미지 저장 → 아이템 생성.

    순서: 이미지 파일 기록 → catalog/<id>.json 기록 → config.json 갱신.
    파일이 없으면 아무것도 기록하지 않음.

    Raises:
        CatalogError: NO_FILE_SPECIFIED, INVALID_FILENAME, IMAGE_WRITE_FAILED,
                      ITEM_WRITE_FAILED, CONFIG_LOCK_TIMEOUT
    """
    image = form.get(FIELD_IMAGE)
    if not isinstance(image, FilePart) or image.is_empty:
        raise CatalogError(ErrorCodes.NO_FILE_SPECIFIED, field=FIELD_IMAGE)

    context.store.save_image(image.filename, image.data)
    return context.store.create_item(
        name=_text_field(form, FIELD_ITEM_NAME),
        description=_text_field(form, FIELD_ITEM_DESCRIPTION),
        image=image.filename,
    )


# =============================================================================
# Page Routes (HTML)
# =============================================================================

@router.get("/", response_class=HTMLResponse)
@router.get("/catalog", response_class=HTMLResponse)
@router.get("/gallery", response_class=HTMLResponse)
async def catalog_page(context: CatalogContext = Depends(get_context)) -> HTMLResponse:
    """카탈로그 목록 화면."""
    return HTMLResponse(content=render_catalog_page(context))


@router.get("/upload", response_class=HTMLResponse)
async def upload_page(context: CatalogContext = Depends(get_context)) -> HTMLResponse:
    """업로드 폼 화면."""
    return HTMLResponse(content=context.renderer.render(UPLOAD_TEMPLATE))


@router.post("/", response_class=HTMLResponse)
@router.post("/catalog", response_class=HTMLResponse)
@router.post("/gallery", response_class=HTMLResponse)
@router.post("/upload", response_class=HTMLResponse)
async def upload_item(
    form: FormBody = Depends(parse_multipart),
    context: CatalogContext = Depends(get_context),
) -> HTMLResponse:
    """
    업로드 제출.

    성공 시 리다이렉트 없이 갱신된 목록 페이지를 바로 응답.
    """
    create_item_from_form(context, form)
    return HTMLResponse(content=render_catalog_page(context))


# =============================================================================
# Health
# =============================================================================

@router.get("/health")
async def health() -> dict[str, Any]:
    """헬스 체크."""
    return {"status": "ok"}
