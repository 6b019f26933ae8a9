"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload --port 3000
- 프로덕션: uv run python -m src.app.main  (default.yaml 의 server.host/port 사용)
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse

from src.app.context import build_context, get_context
from src.app.routes import catalog, resources
from src.domain.constants import DEFAULT_HOST, DEFAULT_PORT
from src.domain.errors import CatalogError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: config.json 준비, templates/ + 스타일시트 로드
    (실패 시 예외 전파 → 서버 기동 중단)
    """
    # Startup
    app.state.context = build_context(app.state.config, app.state.root)

    yield

    # Shutdown
    # (파일 핸들 등 정리할 리소스 없음)


# =============================================================================
# Error Handling
# =============================================================================


async def catalog_error_handler(request: Request, exc: CatalogError) -> PlainTextResponse:
    """CatalogError → plain text 응답 (400 / 404 / 500)."""
    status_code = exc.status_code
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.to_dict()}", exc_info=exc)
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.to_dict()}")

    return PlainTextResponse(content=exc.public_message, status_code=status_code)


# =============================================================================
# Middleware
# =============================================================================


async def apply_title_query(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """
    ?title=<value> 가 있으면 config.json 제목 변경 (경로 무관, 404 경로 포함).

    catalog.allow_title_query: false 로 비활성화 가능. 인증 없음.
    라우트 처리 전에 적용되므로 같은 요청의 페이지에 새 제목이 보임.
    """
    context = get_context(request)
    title = request.query_params.get("title")

    if title and context.allow_title_query:
        try:
            context.store.update_title(title)
        except CatalogError as e:
            return await catalog_error_handler(request, e)

    return await call_next(request)


# =============================================================================
# App Factory
# =============================================================================


def create_app(config: dict | None = None, root: Path | None = None) -> FastAPI:
    """
    FastAPI 앱 생성.

    Args:
        config: 설정 dict (None이면 default.yaml 로드)
        root: 상대 경로 기준 디렉터리 (None이면 프로젝트 루트)

    Returns:
        FastAPI 인스턴스 (context는 lifespan에서 구성)
    """
    app = FastAPI(
        title="Catalog Server",
        description="JSON 파일 기반 아이템 카탈로그 + 이미지 업로드",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = load_config() if config is None else config
    app.state.root = root or PROJECT_ROOT

    app.add_exception_handler(CatalogError, catalog_error_handler)  # type: ignore[arg-type]
    app.middleware("http")(apply_title_query)

    # 고정 경로 먼저, /{resource} 폴백은 마지막
    app.include_router(catalog.router, tags=["Catalog"])
    app.include_router(resources.router, tags=["Resources"])

    return app


# =============================================================================
# App Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    server = app.state.config.get("server", {})
    uvicorn.run(
        "src.app.main:app",
        host=server.get("host", DEFAULT_HOST),
        port=server.get("port", DEFAULT_PORT),
    )
