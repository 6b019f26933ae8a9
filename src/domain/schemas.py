"""
Data schemas for the catalog.

규칙:
- 필드명 통일: JSON 키는 저장 포맷 그대로 (id, name, description, image / title, itemCount)
- 파일 시스템이 진실 원천: 요청 간 아이템 캐시 없음
"""

from dataclasses import dataclass
from typing import Any

# =============================================================================
# Catalog Schemas
# =============================================================================

@dataclass
class Item:
    """
    카탈로그 아이템 1개.

    catalog/<id>.json 으로 저장. 생성 후 수정/삭제하지 않음.
    """
    id: int
    name: str
    description: str
    image: str  # images/ 아래 파일명 (업로드 원본 이름)

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Item":
        """
        JSON dict에서 생성.

        Raises:
            KeyError: 필수 키 누락
            ValueError / TypeError: id가 정수로 변환 불가
        """
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            description=str(data["description"]),
            image=str(data["image"]),
        )


@dataclass
class CatalogConfig:
    """
    config.json 싱글톤.

    item_count는 다음 id 발급용 high-water mark.
    아이템이 외부에서 삭제되어도 감소하지 않음.
    """
    title: str
    item_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용."""
        return {
            "title": self.title,
            "itemCount": self.item_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CatalogConfig":
        """JSON dict에서 생성."""
        return cls(
            title=str(data["title"]),
            item_count=int(data.get("itemCount", 0)),
        )


# =============================================================================
# Multipart Form Schemas
# =============================================================================

@dataclass
class FilePart:
    """
    multipart 파일 필드.

    filename == "": 파일 선택 없이 제출된 필드 (브라우저 기본 동작).
    Content-Disposition에 filename 파라미터가 없는 파트는 텍스트 필드로 취급.
    """
    filename: str
    data: bytes = b""
    content_type: str | None = None

    @property
    def is_empty(self) -> bool:
        """업로드된 파일이 없는지 여부."""
        return not self.filename


# 필드 이름 → 텍스트 값 또는 FilePart
FormBody = dict[str, str | FilePart]
