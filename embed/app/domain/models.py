"""Domain models: typed upstream documents and the flattened preview fields."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Relationship(_Frozen):
    """A ``{type, id}`` reference embedded in a primary record."""

    type: str
    id: str


class MangaAttributes(_Frozen):
    title: dict[str, str] = Field(default_factory=dict)
    description: dict[str, str] = Field(default_factory=dict)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _normalize_localized_map(cls, value: Any) -> Any:
        # The catalog serializes an empty localized map as [].
        if value is None or value == []:
            return {}
        if isinstance(value, dict):
            return {lang: "" if text is None else text for lang, text in value.items()}
        return value


class MangaData(_Frozen):
    id: str = ""
    attributes: MangaAttributes
    relationships: list[Relationship] = Field(default_factory=list)


class MangaDocument(_Frozen):
    data: MangaData


class AuthorAttributes(_Frozen):
    name: str


class AuthorData(_Frozen):
    attributes: AuthorAttributes


class AuthorDocument(_Frozen):
    data: AuthorData


class CoverAttributes(_Frozen):
    file_name: str = Field(alias="fileName")


class CoverData(_Frozen):
    attributes: CoverAttributes


class CoverDocument(_Frozen):
    data: CoverData


@dataclass(frozen=True)
class PreviewFields:
    """Renderer-ready result of the aggregation pipeline (value object)."""

    title: str = ""
    description: str = ""
    canonical_url: str = ""
    image_url: str = ""

    def to_template_context(self) -> dict[str, str]:
        """Named variables consumed by ``embed.html``."""
        return {
            "og_title": self.title,
            "og_content": self.description,
            "og_name": self.canonical_url,
            "og_image": self.image_url,
            "redirect": self.canonical_url,
        }
