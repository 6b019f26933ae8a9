"""
파일 저장소 기본 연산: 원자적 JSON 쓰기/읽기, config 락.

규칙:
- 원자적 쓰기: temp → rename + fsync
- 락 관리: 컨텍스트 매니저 (filelock)
- fsync 실패 시 경고 남기고 계속 진행
"""

import json
import logging
import os
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from src.domain.constants import CONFIG_LOCK_SUFFIX
from src.domain.errors import CatalogError, ErrorCodes

logger = logging.getLogger(__name__)

# =============================================================================
# Lock Management
# =============================================================================


@contextmanager
def config_lock(config_path: Path, timeout: float) -> Generator[Path, None, None]:
    """
    config.json read-modify-write 구간용 파일 락.

    사용법:
        with config_lock(config_path, timeout=10):
            # config.json 읽기/쓰기

    같은 프로세스의 다른 요청/스레드, 다른 worker 프로세스 모두 직렬화.

    Args:
        config_path: config.json 경로 (락 파일은 <config_path>.lock)
        timeout: 락 대기 시간 (초)

    Yields:
        lock_path: 락 파일 경로

    Raises:
        CatalogError: CONFIG_LOCK_TIMEOUT
    """
    lock_path = config_path.with_name(config_path.name + CONFIG_LOCK_SUFFIX)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        lock.acquire()
    except Timeout as e:
        raise CatalogError(
            ErrorCodes.CONFIG_LOCK_TIMEOUT,
            path=str(config_path),
            timeout=timeout,
        ) from e

    try:
        yield lock_path
    finally:
        lock.release()


# =============================================================================
# Atomic Write
# =============================================================================


def _fsync_dir(dir_path: Path) -> None:
    """
    디렉토리 fsync (가능한 환경에서).

    rename 후 디렉토리 엔트리까지 내구성을 강화하려면 필요.
    """
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        # O_DIRECTORY 미지원 (Windows), 권한 문제 등
        logger.warning(f"Directory fsync failed for {dir_path}: {e}")


def atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    """
    원자적 JSON 쓰기.

    동작:
    - 중간 상태 없음: temp → rename
    - 파일 fsync + 디렉토리 fsync
    - 실패 시 temp 파일 삭제, 기존 파일 보존

    Args:
        path: 저장할 파일 경로
        data: JSON 직렬화할 데이터

    Raises:
        OSError: 쓰기/rename 실패 (호출자가 에러 코드로 변환)
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"File fsync failed for {path}: {e}")

        os.replace(temp_path, path)
        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


def load_json(path: Path) -> dict[str, Any]:
    """
    JSON 파일 로드.

    Raises:
        FileNotFoundError: 파일 없음
        json.JSONDecodeError: 파싱 실패
    """
    data: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
    return data
