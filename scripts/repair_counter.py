#!/usr/bin/env python3
"""
repair_counter.py - config.json itemCount 보정 스크립트

catalog/*.json 의 최대 id 보다 itemCount 가 작으면 (외부에서 파일 추가,
이전 버전의 동시 업로드 경합 등) itemCount 를 최대 id 로 올린다.
itemCount 를 낮추지는 않는다 (삭제된 아이템의 id 재사용 방지).

사용법:
    # 기본 실행 (dry-run)
    uv run python scripts/repair_counter.py

    # 실제 반영
    uv run python scripts/repair_counter.py --execute

    # 다른 설정 파일
    uv run python scripts/repair_counter.py --config /path/to/default.yaml --execute
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.app.context import resolve_path  # noqa: E402
from src.core.catalog import CatalogStore  # noqa: E402
from src.core.storage import atomic_write_json, config_lock  # noqa: E402
from src.domain.constants import CATALOG_DIR, CONFIG_FILENAME, DEFAULT_LOCK_TIMEOUT, IMAGES_DIR  # noqa: E402

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@dataclass
class RepairResult:
    """보정 결과."""
    item_count: int
    max_item_id: int
    item_total: int
    applied: bool = False

    @property
    def needs_repair(self) -> bool:
        return self.max_item_id > self.item_count


def load_settings(config_path: Path) -> dict:
    """default.yaml 로드 (없으면 빈 dict)."""
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def build_store(settings: dict, root: Path) -> CatalogStore:
    """설정으로 CatalogStore 구성 (디렉터리/파일 생성 없음)."""
    paths = settings.get("paths", {})
    return CatalogStore(
        config_path=resolve_path(root, paths.get("config_file"), CONFIG_FILENAME),
        catalog_dir=resolve_path(root, paths.get("catalog_dir"), CATALOG_DIR),
        images_dir=resolve_path(root, paths.get("images_dir"), IMAGES_DIR),
        lock_timeout=settings.get("catalog", {}).get("lock_timeout", DEFAULT_LOCK_TIMEOUT),
    )


def repair_counter(store: CatalogStore, execute: bool = False) -> RepairResult:
    """
    itemCount 를 catalog/ 의 최대 id 이상으로 보정.

    Args:
        store: CatalogStore
        execute: False면 dry-run (기록 안 함)

    Returns:
        RepairResult

    Raises:
        CatalogError: CATALOG_READ_FAILED, ITEM_CORRUPT, CONFIG_CORRUPT
    """
    with config_lock(store.config_path, store.lock_timeout):
        items = store.list_items()
        config = store.load_config()
        result = RepairResult(
            item_count=config.item_count,
            max_item_id=max((item.id for item in items), default=0),
            item_total=len(items),
        )

        if result.needs_repair and execute:
            config.item_count = result.max_item_id
            atomic_write_json(store.config_path, config.to_dict())
            result.applied = True

    return result


def main() -> int:
    parser = argparse.ArgumentParser(description="config.json itemCount 보정")
    parser.add_argument(
        "--config",
        type=Path,
        default=PROJECT_ROOT / "default.yaml",
        help="설정 파일 경로 (기본: default.yaml)",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=PROJECT_ROOT,
        help="상대 경로 기준 디렉터리 (기본: 프로젝트 루트)",
    )
    parser.add_argument(
        "--execute",
        action="store_true",
        help="실제 반영 (기본: dry-run)",
    )
    args = parser.parse_args()

    store = build_store(load_settings(args.config), args.root)
    result = repair_counter(store, execute=args.execute)

    logger.info(
        f"items={result.item_total}, max_id={result.max_item_id}, "
        f"itemCount={result.item_count}"
    )
    if not result.needs_repair:
        logger.info("itemCount is up to date")
    elif result.applied:
        logger.info(f"itemCount raised {result.item_count} -> {result.max_item_id}")
    else:
        logger.warning(
            f"itemCount is behind ({result.item_count} < {result.max_item_id}); "
            f"rerun with --execute to fix"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
