"""
test_catalog.py - Catalog Store 테스트

검증:
- list_items: 전체 로드, id 정렬, 손상 파일 1개 → 전체 실패
- get_item: 없는 id → ITEM_NOT_FOUND
- create_item: itemCount + 1 = 새 id, 아이템/config 기록
- save_image / get_image: 덮어쓰기, 없는 파일, 경로 순회 차단
"""

import json
import threading
from pathlib import Path

import pytest

from src.core.catalog import CatalogStore, is_safe_filename
from src.domain.errors import CatalogError, ErrorCodes
from src.domain.schemas import Item


def read_config(root: Path) -> dict:
    return json.loads((root / "config.json").read_text(encoding="utf-8"))


# =============================================================================
# ensure_layout / config
# =============================================================================

class TestLayout:
    """디렉터리 / config.json 준비 테스트."""

    def test_creates_missing_config(self, tmp_path: Path):
        """config.json 없으면 기본 제목 + itemCount 0 으로 생성."""
        store = CatalogStore(
            config_path=tmp_path / "config.json",
            catalog_dir=tmp_path / "catalog",
            images_dir=tmp_path / "images",
            default_title="Fresh",
        )

        config = store.ensure_layout()

        assert config.title == "Fresh"
        assert config.item_count == 0
        assert read_config(tmp_path) == {"title": "Fresh", "itemCount": 0}
        assert (tmp_path / "catalog").is_dir()
        assert (tmp_path / "images").is_dir()

    def test_missing_config_seeded_from_existing_items(
        self, store: CatalogStore, five_items, catalog_root: Path
    ):
        """config.json 만 사라진 경우 itemCount = 남은 아이템 최대 id."""
        (catalog_root / "config.json").unlink()

        config = store.ensure_layout()

        assert config.item_count == 5
        assert read_config(catalog_root)["itemCount"] == 5

    def test_new_item_after_config_loss_keeps_existing(
        self, store: CatalogStore, five_items, catalog_root: Path
    ):
        """config.json 재생성 후 업로드해도 기존 1.json 유지."""
        (catalog_root / "config.json").unlink()
        store.ensure_layout()

        item = store.create_item("Newcomer", "", "new.png")

        assert item.id == 6
        assert store.get_item(1).name == "Item 1"

    def test_max_item_id_ignores_non_numeric(self, store: CatalogStore, item_writer, catalog_root: Path):
        item_writer(3)
        (catalog_root / "catalog" / "notes.json").write_text("{}", encoding="utf-8")
        (catalog_root / "catalog" / "9.txt").write_text("x", encoding="utf-8")

        assert store.max_item_id() == 3

    def test_keeps_existing_config(self, store: CatalogStore, five_items, catalog_root: Path):
        """기존 config.json 은 덮어쓰지 않음."""
        config = store.ensure_layout()

        assert config.item_count == 5
        assert read_config(catalog_root)["itemCount"] == 5

    def test_corrupt_config_rejected(self, store: CatalogStore, catalog_root: Path):
        """손상된 config.json → CONFIG_CORRUPT."""
        (catalog_root / "config.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(CatalogError) as exc_info:
            store.ensure_layout()

        assert exc_info.value.code == ErrorCodes.CONFIG_CORRUPT

    def test_update_title(self, store: CatalogStore, five_items, catalog_root: Path):
        """제목만 변경, itemCount 유지."""
        config = store.update_title("Renamed")

        assert config.title == "Renamed"
        assert read_config(catalog_root) == {"title": "Renamed", "itemCount": 5}


# =============================================================================
# list_items / get_item
# =============================================================================

class TestReadItems:
    """아이템 읽기 테스트."""

    def test_list_empty(self, store: CatalogStore):
        assert store.list_items() == []

    def test_list_sorted_by_id(self, store: CatalogStore, item_writer):
        """파일명 정렬이 아닌 id 숫자 정렬 (10 > 9)."""
        for item_id in (10, 2, 9):
            item_writer(item_id)

        items = store.list_items()

        assert [item.id for item in items] == [2, 9, 10]

    def test_list_ignores_non_json(self, store: CatalogStore, item_writer, catalog_root: Path):
        """.json 이 아닌 파일 (.gitkeep, 임시 파일) 은 무시."""
        item_writer(1)
        (catalog_root / "catalog" / ".gitkeep").touch()
        (catalog_root / "catalog" / "tmpabc.tmp").write_text("partial", encoding="utf-8")

        assert [item.id for item in store.list_items()] == [1]

    def test_list_fails_on_single_corrupt_file(self, store: CatalogStore, item_writer, catalog_root: Path):
        """손상 파일 1개 → 목록 전체 실패 (건너뛰지 않음)."""
        item_writer(1)
        (catalog_root / "catalog" / "2.json").write_text("{broken", encoding="utf-8")

        with pytest.raises(CatalogError) as exc_info:
            store.list_items()

        assert exc_info.value.code == ErrorCodes.ITEM_CORRUPT

    def test_list_missing_directory(self, store: CatalogStore, catalog_root: Path):
        """catalog/ 디렉터리 없음 → CATALOG_READ_FAILED."""
        (catalog_root / "catalog").rmdir()

        with pytest.raises(CatalogError) as exc_info:
            store.list_items()

        assert exc_info.value.code == ErrorCodes.CATALOG_READ_FAILED

    def test_get_item(self, store: CatalogStore, five_items):
        item = store.get_item(3)

        assert item == Item(id=3, name="Item 3", description="Description 3", image="item3.png")

    def test_get_missing_item(self, store: CatalogStore):
        with pytest.raises(CatalogError) as exc_info:
            store.get_item(42)

        assert exc_info.value.code == ErrorCodes.ITEM_NOT_FOUND
        assert exc_info.value.status_code == 404

    def test_get_item_missing_keys(self, store: CatalogStore, catalog_root: Path):
        """필수 키 누락 → ITEM_CORRUPT."""
        (catalog_root / "catalog" / "1.json").write_text('{"id": 1}', encoding="utf-8")

        with pytest.raises(CatalogError) as exc_info:
            store.get_item(1)

        assert exc_info.value.code == ErrorCodes.ITEM_CORRUPT


# =============================================================================
# create_item
# =============================================================================

class TestCreateItem:
    """아이템 생성 테스트."""

    def test_scenario_sixth_item(self, store: CatalogStore, five_items, catalog_root: Path):
        """itemCount=5 → 새 아이템 id 6, catalog/6.json 기록."""
        item = store.create_item("Lamp", "A desk lamp", "lamp.png")

        assert item.id == 6
        saved = json.loads((catalog_root / "catalog" / "6.json").read_text(encoding="utf-8"))
        assert saved == {"id": 6, "name": "Lamp", "description": "A desk lamp", "image": "lamp.png"}
        assert read_config(catalog_root)["itemCount"] == 6

    def test_round_trip(self, store: CatalogStore):
        """생성 → get_item 결과가 입력과 동일."""
        created = store.create_item("Mug", "Ceramic, 350 ml", "mug.jpg")

        assert store.get_item(created.id) == created

    def test_item_count_is_high_water_mark(self, store: CatalogStore, five_items, catalog_root: Path):
        """아이템 파일이 삭제돼도 id 재사용 없음."""
        (catalog_root / "catalog" / "5.json").unlink()

        item = store.create_item("Next", "", "next.png")

        assert item.id == 6

    def test_stale_count_skips_existing_item(self, store: CatalogStore, five_items, catalog_root: Path):
        """itemCount 가 뒤처져도 기존 아이템 파일은 덮어쓰지 않음."""
        (catalog_root / "config.json").write_text(
            json.dumps({"title": "Test Catalog", "itemCount": 2}), encoding="utf-8"
        )

        item = store.create_item("Newcomer", "", "new.png")

        assert item.id == 6
        assert store.get_item(3).name == "Item 3"
        assert read_config(catalog_root)["itemCount"] == 6

    def test_preserves_title(self, store: CatalogStore, five_items, catalog_root: Path):
        store.create_item("Lamp", "A desk lamp", "lamp.png")

        assert read_config(catalog_root)["title"] == "Test Catalog"

    def test_concurrent_creates_get_distinct_ids(self, store: CatalogStore, catalog_root: Path):
        """동시 생성 시 id 충돌 없음 (config_lock)."""
        errors: list[Exception] = []

        def worker(n: int) -> None:
            try:
                store.create_item(f"Item {n}", "", f"{n}.png")
            except Exception as e:  # pragma: no cover - 실패 시 assert 로 드러남
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        ids = sorted(item.id for item in store.list_items())
        assert ids == list(range(1, 11))
        assert read_config(catalog_root)["itemCount"] == 10


# =============================================================================
# Images
# =============================================================================

class TestImages:
    """이미지 저장/조회 테스트."""

    def test_save_and_get(self, store: CatalogStore):
        store.save_image("lamp.png", b"\x89PNGdata")

        assert store.get_image("lamp.png") == b"\x89PNGdata"

    def test_save_overwrites(self, store: CatalogStore):
        """같은 파일명 → 덮어씀."""
        store.save_image("shared.jpg", b"first")
        store.save_image("shared.jpg", b"second")

        assert store.get_image("shared.jpg") == b"second"

    def test_get_missing(self, store: CatalogStore):
        with pytest.raises(CatalogError) as exc_info:
            store.get_image("never.png")

        assert exc_info.value.code == ErrorCodes.IMAGE_NOT_FOUND

    def test_get_outside_images_dir(self, store: CatalogStore, catalog_root: Path):
        """images/ 밖 경로는 없는 파일로 취급."""
        with pytest.raises(CatalogError) as exc_info:
            store.get_image("../config.json")

        assert exc_info.value.code == ErrorCodes.IMAGE_NOT_FOUND

    def test_save_rejects_path_components(self, store: CatalogStore, catalog_root: Path):
        with pytest.raises(CatalogError) as exc_info:
            store.save_image("../evil.png", b"x")

        assert exc_info.value.code == ErrorCodes.INVALID_FILENAME
        assert not (catalog_root / "evil.png").exists()

    def test_save_write_failure(self, store: CatalogStore, catalog_root: Path):
        """images/ 가 없으면 IMAGE_WRITE_FAILED."""
        (catalog_root / "images").rmdir()

        with pytest.raises(CatalogError) as exc_info:
            store.save_image("lamp.png", b"x")

        assert exc_info.value.code == ErrorCodes.IMAGE_WRITE_FAILED
        assert exc_info.value.status_code == 500


class TestIsSafeFilename:
    """파일명 검증 테스트."""

    @pytest.mark.parametrize("name", ["lamp.png", "My Photo.JPG", "a..b.svg", "사진.png"])
    def test_safe(self, name: str):
        assert is_safe_filename(name)

    @pytest.mark.parametrize("name", ["", ".", "..", "../x.png", "dir/x.png", "dir\\x.png", "x\x00.png"])
    def test_unsafe(self, name: str):
        assert not is_safe_filename(name)
