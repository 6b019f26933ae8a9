"""
HTML 페이지 조립: 카탈로그 목록 / 아이템 상세.

템플릿 placeholder:
- catalog.html: {{title}}, {{imageTags}}
- detail.html: {{title}}, {{name}}, {{description}}, {{imageTag}}
"""

from urllib.parse import quote

from markupsafe import Markup

from src.app.context import CatalogContext
from src.domain.constants import DETAIL_TEMPLATE, LIST_TEMPLATE
from src.domain.schemas import Item


def image_url(filename: str) -> str:
    """이미지 URL (/<filename>, URL 인코딩)."""
    return "/" + quote(filename)


def detail_url(item: Item) -> str:
    """아이템 상세 URL (/<id>)."""
    return f"/{item.id}"


def image_tag(item: Item) -> Markup:
    """<img> 태그 (썸네일도 원본 이미지 + CSS 클래스)."""
    return Markup('<img class="item-image" src="{}" alt="{}">').format(
        image_url(item.image), item.image
    )


def item_link_tag(item: Item) -> Markup:
    """상세 페이지로 연결되는 <a><img></a>."""
    return Markup('<a class="item-link" href="{}">{}</a>').format(
        detail_url(item), image_tag(item)
    )


def render_catalog_page(context: CatalogContext) -> str:
    """
    목록 페이지 렌더링.

    Raises:
        CatalogError: CATALOG_READ_FAILED, ITEM_CORRUPT, CONFIG_CORRUPT
    """
    items = context.store.list_items()
    config = context.store.load_config()

    return context.renderer.render(LIST_TEMPLATE, {
        "title": config.title,
        "imageTags": Markup("\n").join(item_link_tag(item) for item in items),
    })


def render_detail_page(context: CatalogContext, item: Item) -> str:
    """상세 페이지 렌더링."""
    config = context.store.load_config()

    return context.renderer.render(DETAIL_TEMPLATE, {
        "title": config.title,
        "name": item.name,
        "description": item.description,
        "imageTag": image_tag(item),
    })
