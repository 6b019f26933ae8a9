"""
HTML 템플릿 렌더러: {{key}} 치환.

규칙:
- templates/ 디렉터리는 시작 시 1회 로드 (reload 없음)
- 디렉터리 읽기 실패 = 시작 실패 (fatal)
- 없는 템플릿 이름 = 프로그래머 에러 → TemplateError 그대로 전파
- 값은 HTML escape, Markup 값(미리 만든 태그)은 그대로 삽입
- 매칭되는 키가 없는 placeholder는 치환하지 않고 남겨둠
"""

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from markupsafe import escape

# =============================================================================
# Exceptions
# =============================================================================

class TemplateError(Exception):
    """템플릿 관련 에러."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


# {{title}}, {{ imageTags }} 등
PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def detect_placeholders(text: str) -> list[str]:
    """텍스트에서 placeholder 이름 목록 추출 (등장 순서, 중복 제거)."""
    return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(text)))


def substitute(text: str, values: Mapping[str, Any]) -> str:
    """
    placeholder를 값으로 치환 (순수 함수).

    Args:
        text: 템플릿 원문
        values: placeholder 이름 → 값. str은 escape, Markup은 그대로.

    Returns:
        치환된 문자열. values에 없는 placeholder는 원문 그대로.
    """
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in values:
            return match.group(0)
        return str(escape(values[key]))

    return PLACEHOLDER_PATTERN.sub(_replace, text)


class TemplateRenderer:
    """
    이름 → 원문 매핑을 들고 있는 렌더러.

    Usage:
        renderer = TemplateRenderer.load_directory(Path("templates"))
        html = renderer.render("catalog.html", {"title": "My Catalog"})
    """

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        self._templates: dict[str, str] = dict(templates or {})

    @classmethod
    def load_directory(cls, path: Path) -> "TemplateRenderer":
        """
        디렉터리의 모든 파일을 읽어 렌더러 생성.

        Args:
            path: templates/ 디렉터리

        Returns:
            TemplateRenderer (파일명 → 원문)

        Raises:
            TemplateError: TEMPLATE_DIR_UNREADABLE
        """
        try:
            templates = {
                entry.name: entry.read_text(encoding="utf-8")
                for entry in sorted(path.iterdir())
                if entry.is_file()
            }
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateError(
                "TEMPLATE_DIR_UNREADABLE",
                f"Cannot read templates directory: {path}",
                path=str(path),
                error=str(e),
            ) from e

        return cls(templates)

    @property
    def names(self) -> list[str]:
        """로드된 템플릿 이름 목록."""
        return sorted(self._templates)

    def get(self, name: str) -> str:
        """
        템플릿 원문 반환.

        Raises:
            TemplateError: TEMPLATE_NOT_FOUND
        """
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateError(
                "TEMPLATE_NOT_FOUND",
                f"Template '{name}' not found",
                name=name,
            ) from None

    def render(self, name: str, substitutions: Mapping[str, Any] | None = None) -> str:
        """
        템플릿 렌더링.

        substitutions 없이 호출하면 원문 그대로 반환 (업로드 폼 등 정적 페이지).
        """
        text = self.get(name)
        if substitutions is None:
            return text
        return substitute(text, substitutions)
