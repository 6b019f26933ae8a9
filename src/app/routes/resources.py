"""
Resource Routes: /<name> 단일 경로 요소 요청 분기.

판정 순서 (RESOURCE_ROUTES, 먼저 매칭되는 것이 우선):
1. stylesheet: *.css → 메모리 스타일시트 (text/css)
2. image: *.jpg, *.jpeg, *.png, *.svg, *.bmp, *.ico (대소문자 무관) → images/<name>
3. detail: 나머지 전부 → /<id> 또는 /<id>.json 상세 페이지

확장자 판정이 id 조회보다 우선: /5.png 는 이미지 요청.
고정 경로 (/, /catalog, /upload, ...)는 routes/catalog.py 에서 먼저 매칭됨.
"""

from collections.abc import Callable
from typing import NamedTuple

from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse

from src.app.context import CatalogContext, get_context
from src.app.services.pages import render_detail_page
from src.domain.constants import (
    IMAGE_EXTENSIONS,
    ITEM_FILE_SUFFIX,
    STYLESHEET_MIME_TYPE,
    get_extension,
    get_image_mime_type,
)
from src.domain.errors import CatalogError, ErrorCodes

router = APIRouter()


# =============================================================================
# Predicates
# =============================================================================

def is_stylesheet(name: str) -> bool:
    return get_extension(name) == ".css"


def is_image(name: str) -> bool:
    return get_extension(name) in IMAGE_EXTENSIONS


def is_detail(name: str) -> bool:
    # 폴백: 다른 규칙에 걸리지 않은 이름은 모두 id로 해석
    return True


def parse_item_id(name: str) -> int:
    """
    "7" 또는 "7.json" → 7.

    Raises:
        CatalogError: ITEM_NOT_FOUND (숫자 id가 아님)
    """
    stem = name
    if stem.lower().endswith(ITEM_FILE_SUFFIX):
        stem = stem[: -len(ITEM_FILE_SUFFIX)]
    if not stem.isdigit() or not stem.isascii():
        raise CatalogError(ErrorCodes.ITEM_NOT_FOUND, resource=name)
    return int(stem)


# =============================================================================
# Handlers
# =============================================================================

def serve_stylesheet(context: CatalogContext, name: str) -> Response:
    """시작 시 로드한 스타일시트 그대로 응답 (이름 무관)."""
    return Response(content=context.stylesheet, media_type=STYLESHEET_MIME_TYPE)


def serve_image(context: CatalogContext, name: str) -> Response:
    """
    images/<name> 응답.

    Raises:
        CatalogError: IMAGE_NOT_FOUND
    """
    data = context.store.get_image(name)
    return Response(content=data, media_type=get_image_mime_type(name))


def serve_detail(context: CatalogContext, name: str) -> Response:
    """
    아이템 상세 페이지.

    Raises:
        CatalogError: ITEM_NOT_FOUND, ITEM_CORRUPT
    """
    item = context.store.get_item(parse_item_id(name))
    return HTMLResponse(content=render_detail_page(context, item))


class ResourceRoute(NamedTuple):
    kind: str
    matches: Callable[[str], bool]
    handler: Callable[[CatalogContext, str], Response]


RESOURCE_ROUTES: list[ResourceRoute] = [
    ResourceRoute("stylesheet", is_stylesheet, serve_stylesheet),
    ResourceRoute("image", is_image, serve_image),
    ResourceRoute("detail", is_detail, serve_detail),
]


def resolve_resource(name: str) -> ResourceRoute:
    """이름에 처음 매칭되는 ResourceRoute 반환."""
    for route in RESOURCE_ROUTES:
        if route.matches(name):
            return route
    raise CatalogError(ErrorCodes.ITEM_NOT_FOUND, resource=name)


# =============================================================================
# Routes
# =============================================================================

@router.get("/{resource}")
async def get_resource(
    resource: str,
    context: CatalogContext = Depends(get_context),
) -> Response:
    """스타일시트 / 이미지 / 상세 페이지."""
    route = resolve_resource(resource)
    return route.handler(context, resource)
