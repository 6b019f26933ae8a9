"""
Pytest fixtures for the catalog server tests.

구성:
- tmp_path 아래에 독립된 프로젝트 루트 (config.json, catalog/, images/,
  templates/, public/) 를 만들어 테스트 간 상태 공유 없음
"""

import json
import shutil
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.app.main import create_app
from src.core.catalog import CatalogStore

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def catalog_root(tmp_path: Path, project_root: Path) -> Path:
    """
    테스트용 카탈로그 루트.

    포함:
    - templates/, public/catalog.css (저장소 원본 복사)
    - config.json ({title: "Test Catalog", itemCount: 0})
    - 빈 catalog/, images/
    """
    root = tmp_path / "site"
    root.mkdir()
    shutil.copytree(project_root / "templates", root / "templates")
    shutil.copytree(project_root / "public", root / "public")
    (root / "catalog").mkdir()
    (root / "images").mkdir()
    (root / "config.json").write_text(
        json.dumps({"title": "Test Catalog", "itemCount": 0}), encoding="utf-8"
    )
    return root


@pytest.fixture
def test_config() -> dict:
    """테스트용 설정."""
    return {
        "paths": {
            "config_file": "config.json",
            "catalog_dir": "catalog",
            "images_dir": "images",
            "templates_dir": "templates",
            "stylesheet": "public/catalog.css",
        },
        "catalog": {
            "default_title": "Test Catalog",
            "allow_title_query": True,
            "lock_timeout": 2,
        },
    }


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def store(catalog_root: Path) -> CatalogStore:
    """CatalogStore 인스턴스."""
    return CatalogStore(
        config_path=catalog_root / "config.json",
        catalog_dir=catalog_root / "catalog",
        images_dir=catalog_root / "images",
        default_title="Test Catalog",
        lock_timeout=2,
    )


def write_item(root: Path, item_id: int, name: str | None = None, image: str | None = None) -> dict:
    """catalog/<id>.json 직접 기록 (외부에서 추가된 아이템 시뮬레이션)."""
    data = {
        "id": item_id,
        "name": name or f"Item {item_id}",
        "description": f"Description {item_id}",
        "image": image or f"item{item_id}.png",
    }
    (root / "catalog" / f"{item_id}.json").write_text(json.dumps(data), encoding="utf-8")
    return data


@pytest.fixture
def item_writer(catalog_root: Path):
    """write_item(catalog_root, ...) 바인딩."""
    def _write(item_id: int, name: str | None = None, image: str | None = None) -> dict:
        return write_item(catalog_root, item_id, name=name, image=image)
    return _write


@pytest.fixture
def five_items(catalog_root: Path) -> list[dict]:
    """
    아이템 5개 + itemCount=5 상태.

    포함:
    - catalog/1.json .. 5.json
    - images/item1.png .. item5.png
    """
    items = []
    for item_id in range(1, 6):
        items.append(write_item(catalog_root, item_id))
        (catalog_root / "images" / f"item{item_id}.png").write_bytes(b"\x89PNG fake " + bytes([item_id]))

    (catalog_root / "config.json").write_text(
        json.dumps({"title": "Test Catalog", "itemCount": 5}), encoding="utf-8"
    )
    return items


# =============================================================================
# HTTP Fixtures
# =============================================================================

@pytest.fixture
def client(catalog_root: Path, test_config: dict) -> Generator[TestClient, None, None]:
    """FastAPI TestClient (lifespan 포함)."""
    app = create_app(config=test_config, root=catalog_root)
    with TestClient(app) as client:
        yield client
