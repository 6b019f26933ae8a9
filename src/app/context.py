"""
Application context: 시작 시 1회 구성, 모든 핸들러에 전달.

구성 요소:
- settings: default.yaml 설정 (dict)
- store: CatalogStore (config.json, catalog/, images/)
- renderer: TemplateRenderer (templates/ 로드 완료)
- stylesheet: public/*.css 바이트 (메모리 캐시)

전역 변수 대신 app.state.context 에 보관.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi import Request

from src.core.catalog import CatalogStore
from src.domain.constants import (
    CATALOG_DIR,
    CONFIG_FILENAME,
    DEFAULT_LOCK_TIMEOUT,
    DEFAULT_TITLE,
    IMAGES_DIR,
    STYLESHEET_PATH,
    TEMPLATES_DIR,
)
from src.templates.renderer import TemplateRenderer

logger = logging.getLogger(__name__)


@dataclass
class CatalogContext:
    """요청 처리에 필요한 공유 리소스."""
    settings: dict[str, Any]
    store: CatalogStore
    renderer: TemplateRenderer
    stylesheet: bytes

    @property
    def allow_title_query(self) -> bool:
        """?title= 쿼리로 제목 변경 허용 여부."""
        return bool(self.settings.get("catalog", {}).get("allow_title_query", True))


def resolve_path(root: Path, value: str | None, default: str) -> Path:
    """설정 경로 해석 (상대 경로는 root 기준)."""
    path = Path(value or default)
    return path if path.is_absolute() else root / path


def build_context(settings: dict[str, Any], root: Path) -> CatalogContext:
    """
    설정으로 CatalogContext 구성.

    실패는 모두 시작 실패 (서버 기동 중단):
    - templates/ 읽기 실패 → TemplateError
    - 스타일시트 없음 → OSError
    - config.json 손상 → CatalogError(CONFIG_CORRUPT)

    Args:
        settings: default.yaml 설정
        root: 상대 경로 기준 디렉터리 (프로젝트 루트)

    Returns:
        CatalogContext
    """
    paths = settings.get("paths", {})
    catalog_settings = settings.get("catalog", {})

    store = CatalogStore(
        config_path=resolve_path(root, paths.get("config_file"), CONFIG_FILENAME),
        catalog_dir=resolve_path(root, paths.get("catalog_dir"), CATALOG_DIR),
        images_dir=resolve_path(root, paths.get("images_dir"), IMAGES_DIR),
        default_title=catalog_settings.get("default_title", DEFAULT_TITLE),
        lock_timeout=catalog_settings.get("lock_timeout", DEFAULT_LOCK_TIMEOUT),
    )
    config = store.ensure_layout()

    renderer = TemplateRenderer.load_directory(
        resolve_path(root, paths.get("templates_dir"), TEMPLATES_DIR)
    )
    stylesheet = resolve_path(root, paths.get("stylesheet"), STYLESHEET_PATH).read_bytes()

    logger.info(
        f"Catalog ready: title={config.title!r}, itemCount={config.item_count}, "
        f"templates={renderer.names}"
    )
    return CatalogContext(
        settings=settings,
        store=store,
        renderer=renderer,
        stylesheet=stylesheet,
    )


def get_context(request: Request) -> CatalogContext:
    """Request에서 CatalogContext 가져오기 (FastAPI 의존성)."""
    return request.app.state.context
