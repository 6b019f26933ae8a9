"""
Catalog Store: 아이템 JSON + config.json + 이미지 파일.

저장 구조:
- config.json: {title, itemCount}  (itemCount = 다음 id 발급용 high-water mark)
- catalog/<id>.json: 아이템 1개
- images/<filename>: 업로드 원본 파일명 그대로 (같은 이름이면 덮어씀)

규칙:
- 파일 시스템이 유일한 진실 원천 (아이템 내용 캐시 없음)
- itemCount 증가는 config_lock 안에서만 (동시 업로드 id 충돌 방지)
- 아이템 파일 1개라도 파싱 실패 시 목록 전체 실패
"""

import json
import logging
from pathlib import Path, PurePosixPath, PureWindowsPath

from src.core.storage import atomic_write_json, config_lock, load_json
from src.domain.constants import DEFAULT_LOCK_TIMEOUT, DEFAULT_TITLE, ITEM_FILE_SUFFIX
from src.domain.errors import CatalogError, ErrorCodes
from src.domain.schemas import CatalogConfig, Item

logger = logging.getLogger(__name__)


def is_safe_filename(filename: str) -> bool:
    """
    단일 경로 요소인 파일명인지 확인.

    경로 구분자(/, \\), "..", "." 또는 빈 문자열이면 False.
    """
    if not filename or filename in (".", ".."):
        return False
    if PurePosixPath(filename).name != filename:
        return False
    if PureWindowsPath(filename).name != filename:
        return False
    return "\x00" not in filename


class CatalogStore:
    """
    카탈로그 디렉터리 기반 저장소.

    Usage:
        store = CatalogStore(config_path, catalog_dir, images_dir)
        store.ensure_layout()
        item = store.create_item("Lamp", "A desk lamp", "lamp.png")
    """

    def __init__(
        self,
        config_path: Path,
        catalog_dir: Path,
        images_dir: Path,
        default_title: str = DEFAULT_TITLE,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ) -> None:
        self.config_path = config_path
        self.catalog_dir = catalog_dir
        self.images_dir = images_dir
        self.default_title = default_title
        self.lock_timeout = lock_timeout

    # =========================================================================
    # Layout
    # =========================================================================

    def ensure_layout(self) -> CatalogConfig:
        """
        catalog/, images/ 디렉터리와 config.json 준비.

        config.json이 없으면 {default_title, 최대 아이템 id}로 생성
        (catalog/ 에 남은 아이템 id 재사용 방지).

        Returns:
            현재 CatalogConfig

        Raises:
            CatalogError: CONFIG_CORRUPT, CATALOG_READ_FAILED
        """
        self.catalog_dir.mkdir(parents=True, exist_ok=True)
        self.images_dir.mkdir(parents=True, exist_ok=True)

        with config_lock(self.config_path, self.lock_timeout):
            if self.config_path.exists():
                return self._read_config()

            config = CatalogConfig(title=self.default_title, item_count=self.max_item_id())
            atomic_write_json(self.config_path, config.to_dict())
            logger.info(
                f"Created {self.config_path} "
                f"(title={config.title!r}, itemCount={config.item_count})"
            )
            return config

    # =========================================================================
    # Config
    # =========================================================================

    def _read_config(self) -> CatalogConfig:
        try:
            return CatalogConfig.from_dict(load_json(self.config_path))
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise CatalogError(
                ErrorCodes.CONFIG_CORRUPT,
                path=str(self.config_path),
                error=str(e),
            ) from e

    def load_config(self) -> CatalogConfig:
        """config.json 로드 (title, itemCount)."""
        return self._read_config()

    def update_title(self, title: str) -> CatalogConfig:
        """
        카탈로그 제목 변경 후 config.json 재기록.

        Args:
            title: 새 제목

        Returns:
            갱신된 CatalogConfig
        """
        with config_lock(self.config_path, self.lock_timeout):
            config = self._read_config()
            if config.title == title:
                return config
            config.title = title
            atomic_write_json(self.config_path, config.to_dict())

        logger.info(f"Catalog title changed to {title!r}")
        return config

    # =========================================================================
    # Items
    # =========================================================================

    def item_path(self, item_id: int) -> Path:
        """아이템 파일 경로 (catalog/<id>.json)."""
        return self.catalog_dir / f"{item_id}{ITEM_FILE_SUFFIX}"

    def max_item_id(self) -> int:
        """
        catalog/ 의 <id>.json 파일명 중 최대 id (없으면 0).

        파일 내용은 읽지 않음 (손상 파일이 있어도 id 는 점유된 것으로 취급).
        """
        try:
            ids = [
                int(p.stem) for p in self.catalog_dir.iterdir()
                if p.suffix == ITEM_FILE_SUFFIX and p.stem.isascii() and p.stem.isdigit()
            ]
        except OSError as e:
            raise CatalogError(
                ErrorCodes.CATALOG_READ_FAILED,
                path=str(self.catalog_dir),
                error=str(e),
            ) from e
        return max(ids, default=0)

    def _read_item(self, path: Path) -> Item:
        try:
            return Item.from_dict(load_json(path))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise CatalogError(
                ErrorCodes.ITEM_CORRUPT,
                path=str(path),
                error=str(e),
            ) from e

    def list_items(self) -> list[Item]:
        """
        catalog/ 의 모든 아이템 로드 (id 오름차순).

        Returns:
            Item 목록

        Raises:
            CatalogError: CATALOG_READ_FAILED (디렉터리 읽기 실패),
                          ITEM_CORRUPT (파일 1개라도 파싱 실패 시 전체 실패)
        """
        try:
            paths = [
                p for p in self.catalog_dir.iterdir()
                if p.suffix == ITEM_FILE_SUFFIX and p.is_file()
            ]
        except OSError as e:
            raise CatalogError(
                ErrorCodes.CATALOG_READ_FAILED,
                path=str(self.catalog_dir),
                error=str(e),
            ) from e

        items = []
        for path in paths:
            try:
                items.append(self._read_item(path))
            except OSError as e:
                raise CatalogError(
                    ErrorCodes.CATALOG_READ_FAILED,
                    path=str(path),
                    error=str(e),
                ) from e

        items.sort(key=lambda item: item.id)
        return items

    def get_item(self, item_id: int) -> Item:
        """
        아이템 1개 로드.

        Raises:
            CatalogError: ITEM_NOT_FOUND, ITEM_CORRUPT
        """
        path = self.item_path(item_id)
        try:
            return self._read_item(path)
        except FileNotFoundError as e:
            raise CatalogError(ErrorCodes.ITEM_NOT_FOUND, item_id=item_id) from e
        except OSError as e:
            raise CatalogError(
                ErrorCodes.CATALOG_READ_FAILED,
                path=str(path),
                error=str(e),
            ) from e

    def create_item(self, name: str, description: str, image: str) -> Item:
        """
        새 아이템 생성.

        순서 (config_lock 안에서):
        1. config.json 읽기 → itemCount + 1 을 새 id로 사용
           (catalog/<id>.json 이 이미 있으면 건너뜀, 기존 아이템은 덮어쓰지 않음)
        2. catalog/<id>.json 기록
        3. config.json 재기록

        아이템 기록 실패 시 itemCount는 그대로 남음.

        Args:
            name: 아이템 이름
            description: 설명
            image: images/ 아래 파일명

        Returns:
            생성된 Item

        Raises:
            CatalogError: CONFIG_CORRUPT, CONFIG_LOCK_TIMEOUT, ITEM_WRITE_FAILED
        """
        with config_lock(self.config_path, self.lock_timeout):
            config = self._read_config()
            config.item_count += 1
            while self.item_path(config.item_count).exists():
                logger.warning(
                    f"Item {config.item_count} already exists, itemCount behind catalog/"
                )
                config.item_count += 1
            item = Item(id=config.item_count, name=name, description=description, image=image)

            try:
                atomic_write_json(self.item_path(item.id), item.to_dict())
                atomic_write_json(self.config_path, config.to_dict())
            except OSError as e:
                raise CatalogError(
                    ErrorCodes.ITEM_WRITE_FAILED,
                    item_id=item.id,
                    error=str(e),
                ) from e

        logger.info(f"Created item {item.id} ({item.name!r}, image={item.image!r})")
        return item

    # =========================================================================
    # Images
    # =========================================================================

    def image_path(self, filename: str) -> Path:
        """이미지 파일 경로 (images/<filename>)."""
        return self.images_dir / filename

    def save_image(self, filename: str, data: bytes) -> Path:
        """
        이미지 원본 바이트 저장 (같은 이름이면 덮어씀).

        Raises:
            CatalogError: INVALID_FILENAME, IMAGE_WRITE_FAILED
        """
        if not is_safe_filename(filename):
            raise CatalogError(ErrorCodes.INVALID_FILENAME, filename=filename)

        path = self.image_path(filename)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise CatalogError(
                ErrorCodes.IMAGE_WRITE_FAILED,
                filename=filename,
                error=str(e),
            ) from e
        return path

    def get_image(self, filename: str) -> bytes:
        """
        이미지 바이트 로드.

        Raises:
            CatalogError: IMAGE_NOT_FOUND (없는 파일 또는 images/ 밖을 가리키는 이름)
        """
        if not is_safe_filename(filename):
            raise CatalogError(ErrorCodes.IMAGE_NOT_FOUND, filename=filename)

        path = self.image_path(filename)
        if path.is_symlink():
            raise CatalogError(ErrorCodes.IMAGE_NOT_FOUND, filename=filename)

        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise CatalogError(ErrorCodes.IMAGE_NOT_FOUND, filename=filename) from e
        except OSError as e:
            raise CatalogError(
                ErrorCodes.CATALOG_READ_FAILED,
                path=str(path),
                error=str(e),
            ) from e
