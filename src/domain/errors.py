"""
Error definitions for the catalog server.

규칙:
- 조용한 실패 금지 → CatalogError로 명시적 실패
- 에러는 감지한 핸들러 경계에서 HTTP 응답으로 변환 (app/main.py)
- 4xx: 클라이언트 입력 / 없는 리소스, 5xx: 저장소 실패
"""

from typing import Any


class CatalogError(Exception):
    """
    카탈로그 처리 중 발생하는 에러.

    Usage:
        raise CatalogError("ITEM_NOT_FOUND", item_id=7)
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    @property
    def status_code(self) -> int:
        """HTTP 상태 코드 (매핑에 없으면 500)."""
        return HTTP_STATUS_BY_CODE.get(self.code, 500)

    @property
    def public_message(self) -> str:
        """응답 본문에 노출할 짧은 메시지."""
        if self.code in PUBLIC_MESSAGES:
            return PUBLIC_MESSAGES[self.code]
        if self.status_code == 404:
            return "Resource not found"
        return "Server Error"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수. 새 코드 추가 시 HTTP_STATUS_BY_CODE에도 추가."""

    # === Client input (400) ===
    NO_FILE_SPECIFIED = "NO_FILE_SPECIFIED"
    MULTIPART_INVALID = "MULTIPART_INVALID"
    INVALID_FILENAME = "INVALID_FILENAME"

    # === Not found (404) ===
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

    # === Storage (500) ===
    CATALOG_READ_FAILED = "CATALOG_READ_FAILED"
    ITEM_CORRUPT = "ITEM_CORRUPT"
    ITEM_WRITE_FAILED = "ITEM_WRITE_FAILED"
    IMAGE_WRITE_FAILED = "IMAGE_WRITE_FAILED"
    CONFIG_CORRUPT = "CONFIG_CORRUPT"
    CONFIG_LOCK_TIMEOUT = "CONFIG_LOCK_TIMEOUT"


HTTP_STATUS_BY_CODE = {
    ErrorCodes.NO_FILE_SPECIFIED: 400,
    ErrorCodes.MULTIPART_INVALID: 400,
    ErrorCodes.INVALID_FILENAME: 400,
    ErrorCodes.ITEM_NOT_FOUND: 404,
    ErrorCodes.IMAGE_NOT_FOUND: 404,
    ErrorCodes.CATALOG_READ_FAILED: 500,
    ErrorCodes.ITEM_CORRUPT: 500,
    ErrorCodes.ITEM_WRITE_FAILED: 500,
    ErrorCodes.IMAGE_WRITE_FAILED: 500,
    ErrorCodes.CONFIG_CORRUPT: 500,
    ErrorCodes.CONFIG_LOCK_TIMEOUT: 500,
}

PUBLIC_MESSAGES = {
    ErrorCodes.NO_FILE_SPECIFIED: "No file specified",
    ErrorCodes.MULTIPART_INVALID: "Malformed multipart body",
    ErrorCodes.INVALID_FILENAME: "Invalid filename",
}
