"""
Multipart Form Parser: multipart/form-data 요청 본문 → FormBody.

동작:
1. 요청 본문 전체를 메모리로 읽음 (스트리밍/크기 제한 없음)
2. Content-Type 헤더에서 boundary 추출 (없으면 400)
3. python-multipart 파서로 파트 분리
4. 파트별 Content-Disposition → name / filename
   - filename 파라미터 있음 → FilePart (빈 filename = 파일 미선택)
   - 없음 → 텍스트 필드 (str)

실패 시 CatalogError(MULTIPART_INVALID) → 400 응답, 라우트 본문은 실행되지 않음.

Usage (FastAPI 의존성):
    @router.post("/upload")
    async def upload(form: FormBody = Depends(parse_multipart)) -> ...
"""

import logging

from fastapi import Request
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from src.domain.errors import CatalogError, ErrorCodes
from src.domain.schemas import FilePart, FormBody

logger = logging.getLogger(__name__)

MULTIPART_CONTENT_TYPE = b"multipart/form-data"


def _decode(value: bytes, charset: str = "utf-8") -> str:
    """사용자 입력 디코딩 (실패 시 latin-1)."""
    try:
        return value.decode(charset)
    except (UnicodeDecodeError, LookupError):
        return value.decode("latin-1")


def get_boundary(content_type: str | None) -> bytes:
    """
    Content-Type 헤더에서 boundary 추출.

    Args:
        content_type: Content-Type 헤더 값

    Returns:
        boundary (bytes)

    Raises:
        CatalogError: MULTIPART_INVALID (헤더 없음, multipart 아님, boundary 없음)
    """
    if not content_type:
        raise CatalogError(ErrorCodes.MULTIPART_INVALID, reason="missing Content-Type")

    ctype, options = parse_options_header(content_type)
    if ctype != MULTIPART_CONTENT_TYPE:
        raise CatalogError(
            ErrorCodes.MULTIPART_INVALID,
            reason="not multipart/form-data",
            content_type=content_type,
        )

    boundary = options.get(b"boundary")
    if not boundary:
        raise CatalogError(ErrorCodes.MULTIPART_INVALID, reason="missing boundary")
    return boundary


class _PartCollector:
    """MultipartParser 콜백 → 파트 (헤더 dict, 데이터) 목록."""

    def __init__(self) -> None:
        self.parts: list[tuple[dict[bytes, bytes], bytes]] = []
        self.finished = False
        self._headers: dict[bytes, bytes] = {}
        self._header_field = b""
        self._header_value = b""
        self._data = bytearray()

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_end": self.on_end,
        }

    def on_part_begin(self) -> None:
        self._headers = {}
        self._data = bytearray()

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._data += data[start:end]

    def on_part_end(self) -> None:
        self.parts.append((self._headers, bytes(self._data)))

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers[self._header_field.strip().lower()] = self._header_value.strip()
        self._header_field = b""
        self._header_value = b""

    def on_end(self) -> None:
        self.finished = True


def parse_multipart_body(body: bytes, content_type: str | None) -> FormBody:
    """
    버퍼링된 multipart 본문 파싱.

    Args:
        body: 요청 본문 전체
        content_type: Content-Type 헤더 값

    Returns:
        FormBody (필드 이름 → str 또는 FilePart). 같은 이름이 반복되면 마지막 값.

    Raises:
        CatalogError: MULTIPART_INVALID
    """
    boundary = get_boundary(content_type)
    collector = _PartCollector()
    parser = MultipartParser(boundary, collector.callbacks())

    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as e:
        raise CatalogError(ErrorCodes.MULTIPART_INVALID, reason=str(e)) from e

    if not collector.finished:
        raise CatalogError(ErrorCodes.MULTIPART_INVALID, reason="missing closing boundary")

    form: FormBody = {}
    for headers, data in collector.parts:
        disposition = headers.get(b"content-disposition")
        if disposition is None:
            raise CatalogError(ErrorCodes.MULTIPART_INVALID, reason="part without Content-Disposition")

        _, options = parse_options_header(disposition)
        name = options.get(b"name")
        if name is None:
            raise CatalogError(ErrorCodes.MULTIPART_INVALID, reason="part without field name")

        part_ctype, part_options = b"", {}
        if b"content-type" in headers:
            part_ctype, part_options = parse_options_header(headers[b"content-type"])
        charset = _decode(part_options.get(b"charset", b"utf-8"))

        if b"filename" in options:
            form[_decode(name)] = FilePart(
                filename=_decode(options[b"filename"]),
                data=data,
                content_type=_decode(part_ctype) or None,
            )
        else:
            form[_decode(name)] = _decode(data, charset)

    return form


async def parse_multipart(request: Request) -> FormBody:
    """
    요청 본문을 모두 읽은 뒤 multipart 파싱 (FastAPI 의존성).

    Raises:
        CatalogError: MULTIPART_INVALID
    """
    body = await request.body()
    content_type = request.headers.get("content-type")

    form = parse_multipart_body(body, content_type)
    logger.debug(f"Parsed multipart body: {len(body)} bytes, fields={sorted(form)}")
    return form
