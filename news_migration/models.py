from __future__ import annotations

import datetime as dt
from enum import Enum, IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _LabelledEnum(IntEnum):
    """Integer enumeration whose ordinal is what the destination stores.

    Each subclass declares a ``DEFAULT`` alias; tokens that do not name a
    member resolve to it instead of failing.
    """

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, token: Optional[str]):
        key = (token or "").strip().lower()
        for member in cls:
            if member.name.lower() == key:
                return member
        return cls["DEFAULT"]


class ImageSize(_LabelledEnum):
    SMALL = 0
    MEDIUM = 1
    LARGE = 2
    DEFAULT = 0


class ImagePosition(_LabelledEnum):
    LEFT = 0
    RIGHT = 1
    CENTER = 2
    TOP = 3
    BOTTOM = 4
    DEFAULT = 0


class ContentBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    content_html: str = ""
    image_url: Optional[str] = None
    image_size: ImageSize = ImageSize.DEFAULT
    image_position: ImagePosition = ImagePosition.DEFAULT
    priority: int = Field(..., ge=0)

    def to_archive_dict(self) -> dict[str, Any]:
        return {
            "content": self.content_html,
            "img-src": self.image_url,
            "img-pos": self.image_position.label,
            "img-size": self.image_size.label,
            "order": self.priority,
        }

    @classmethod
    def from_archive_dict(cls, data: dict[str, Any]) -> "ContentBlock":
        return cls(
            content_html=data.get("content") or "",
            image_url=data.get("img-src") or None,
            image_position=ImagePosition.parse(data.get("img-pos")),
            image_size=ImageSize.parse(data.get("img-size")),
            priority=int(data.get("order", 0)),
        )


class NormalizedDocument(BaseModel):
    """One legacy article distilled from its page."""

    model_config = ConfigDict(frozen=True)

    url: str = ""
    title: Optional[str] = None
    date: Optional[dt.date] = None
    main_image_url: Optional[str] = None
    body_html: str = ""
    content_blocks: tuple[ContentBlock, ...] = ()

    @field_validator("content_blocks")
    @classmethod
    def _priorities_ascending(cls, v: tuple[ContentBlock, ...]):
        priorities = [b.priority for b in v]
        if priorities != sorted(set(priorities)):
            raise ValueError("content block priorities must be unique and ascending")
        return v

    def to_archive_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "date": self.date.isoformat() if self.date else None,
            "image": self.main_image_url,
            "body": self.body_html,
            "contentBlocks": [b.to_archive_dict() for b in self.content_blocks],
        }

    @classmethod
    def from_archive_dict(cls, data: dict[str, Any]) -> "NormalizedDocument":
        raw_date = data.get("date")
        blocks = sorted(
            (ContentBlock.from_archive_dict(b) for b in data.get("contentBlocks") or []),
            key=lambda b: b.priority,
        )
        return cls(
            url=data.get("url") or "",
            title=data.get("title"),
            date=dt.date.fromisoformat(raw_date) if raw_date else None,
            main_image_url=data.get("image") or None,
            body_html=data.get("body") or "",
            content_blocks=tuple(blocks),
        )


class RenditionKind(str, Enum):
    ORIGINAL = "original"
    RESPONSIVE = "responsive"


class Rendition(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: RenditionKind
    width: int
    height: int
    blob_name: str


class ImageAsset(BaseModel):
    """All renditions produced from one source image."""

    model_config = ConfigDict(frozen=True)

    source_url: str
    name_root: str
    renditions: tuple[Rendition, ...] = ()

    @property
    def smallest(self) -> Optional[Rendition]:
        responsive = [r for r in self.renditions if r.kind is RenditionKind.RESPONSIVE]
        return min(responsive, key=lambda r: r.width) if responsive else None


class ContentItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_file: Optional[str] = Field(None, alias="imageFile")
    image_size: int = Field(0, alias="imageSize")
    image_position: int = Field(0, alias="imagePosition")
    content: str = ""
    priority: int


class DestinationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: Optional[str] = None
    title: Optional[str] = None
    slug: str = ""
    body: str = ""
    image_thumbnail: Optional[str] = Field(None, alias="imageThumbnail")
    image_main: Optional[str] = Field(None, alias="imageMain")
    content: list[ContentItem] = Field(default_factory=list)
    source_url: Optional[str] = Field(None, exclude=True)

    def to_api_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class LoadStatus(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"


class LoadOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: LoadStatus
    title: Optional[str] = None
    id: Optional[str] = None
    reason: Optional[str] = None
    status_code: Optional[int] = None
    message: Optional[str] = None

    @classmethod
    def created(cls, title: Optional[str], id: str) -> "LoadOutcome":
        return cls(status=LoadStatus.CREATED, title=title, id=id)

    @classmethod
    def skipped(cls, title: Optional[str], reason: str = "duplicate") -> "LoadOutcome":
        return cls(status=LoadStatus.SKIPPED, title=title, reason=reason)

    @classmethod
    def failed(cls, title: Optional[str], status_code: Optional[int], message: str) -> "LoadOutcome":
        return cls(status=LoadStatus.FAILED, title=title, status_code=status_code, message=message)


class LoadReport(BaseModel):
    outcomes: list[LoadOutcome] = Field(default_factory=list)

    def _count(self, status: LoadStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def created(self) -> int:
        return self._count(LoadStatus.CREATED)

    @property
    def skipped(self) -> int:
        return self._count(LoadStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(LoadStatus.FAILED)
