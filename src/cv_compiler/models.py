# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Data models for the CV compiler.

Everything here is caller-owned input to a compile pass. The dataclasses are
frozen and hold tuples so the compiler cannot mutate them.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from cv_compiler.colors import normalize_hex
from cv_compiler.errors import ConfigurationError


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _texts(values: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        values = [values]
    return tuple(t for t in (_text(v) for v in values) if t)


@dataclass(frozen=True)
class ContactInfo:
    """Contact block shown under the name."""
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None

    FIELDS = ("email", "phone", "location", "linkedin", "website")

    def items(self) -> Tuple[Tuple[str, str], ...]:
        """(field, value) pairs for the fields that are set, in display order."""
        return tuple((name, getattr(self, name)) for name in self.FIELDS if getattr(self, name))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["ContactInfo"]:
        if not data:
            return None
        return cls(**{name: _text(data.get(name)) for name in cls.FIELDS})


@dataclass(frozen=True)
class Experience:
    """Represents a single professional experience entry."""
    title: str
    company: str
    period: str
    highlights: Tuple[str, ...] = ()
    location: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Experience":
        return cls(
            title=_text(data.get("title")) or "",
            company=_text(data.get("company")) or "",
            period=_text(data.get("period")) or "",
            highlights=_texts(data.get("highlights")),
            location=_text(data.get("location")),
        )


@dataclass(frozen=True)
class Education:
    """Represents a degree or course."""
    degree: str
    institution: str
    year: str
    details: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Education":
        return cls(
            degree=_text(data.get("degree")) or "",
            institution=_text(data.get("institution")) or "",
            year=_text(data.get("year")) or "",
            details=_text(data.get("details")),
        )


@dataclass(frozen=True)
class Skills:
    technical: Tuple[str, ...] = ()
    soft: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not self.technical and not self.soft


@dataclass(frozen=True)
class Language:
    name: str
    level: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Language":
        # The content generator emits "language"; older payloads use "name".
        return cls(
            name=_text(data.get("name") or data.get("language")) or "",
            level=_text(data.get("level")) or "",
        )


@dataclass(frozen=True)
class CVContent:
    """
    Structured résumé data for one compile pass.
    """
    full_name: str
    headline: Optional[str] = None
    summary: Optional[str] = None
    experience: Tuple[Experience, ...] = ()
    education: Tuple[Education, ...] = ()
    skills: Skills = field(default_factory=Skills)
    languages: Tuple[Language, ...] = ()
    certifications: Tuple[str, ...] = ()
    contact: Optional[ContactInfo] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CVContent":
        """Builds content from the camelCase JSON produced by the content source."""
        skills = data.get("skills") or {}
        return cls(
            full_name=_text(data.get("fullName") or data.get("full_name")) or "",
            headline=_text(data.get("headline")),
            summary=_text(data.get("summary")),
            experience=tuple(Experience.from_dict(e) for e in data.get("experience") or ()),
            education=tuple(Education.from_dict(e) for e in data.get("education") or ()),
            skills=Skills(
                technical=_texts(skills.get("technical")),
                soft=_texts(skills.get("soft")),
            ),
            languages=tuple(Language.from_dict(lang) for lang in data.get("languages") or ()),
            certifications=_texts(data.get("certifications")),
            contact=ContactInfo.from_dict(data.get("contactInfo") or data.get("contact")),
            avatar_url=_text(data.get("avatarUrl") or data.get("avatar_url")),
        )


class RenderMode(str, Enum):
    INTERACTIVE = "interactive"
    EXPORT = "export"
    PREVIEW_PROTECTED = "preview-protected"


class ElementType(str, Enum):
    HEADER = "header"
    HEADER_FIELD = "header-field"
    PHOTO = "photo"
    SECTION = "section"
    SECTION_TITLE = "section-title"
    SUMMARY = "summary"
    EXPERIENCE_ITEM = "experience-item"
    EDUCATION_ITEM = "education-item"
    FIELD = "field"
    HIGHLIGHT = "highlight"
    SKILL_GROUP = "skill-group"
    SKILL_TAG = "skill-tag"
    LANGUAGE_ITEM = "language-item"
    CERTIFICATION_ITEM = "certification-item"


@dataclass(frozen=True)
class ElementOverride:
    """A per-element visual exception layered onto the token defaults."""
    element_id: str
    element_type: ElementType
    hidden: bool = False
    color_override: Optional[str] = None
    background_override: Optional[str] = None

    def __post_init__(self):
        if not self.element_id:
            raise ConfigurationError("override: elementId must not be empty")
        if self.color_override is not None:
            object.__setattr__(
                self, "color_override",
                normalize_hex(self.color_override, f"{self.element_id}.colorOverride"))
        if self.background_override is not None:
            object.__setattr__(
                self, "background_override",
                normalize_hex(self.background_override, f"{self.element_id}.backgroundOverride"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], element_id: Optional[str] = None) -> "ElementOverride":
        element_id = element_id or data.get("elementId") or ""
        raw_type = data.get("elementType")
        try:
            element_type = ElementType(raw_type) if raw_type else _infer_type(element_id)
        except ValueError as e:
            raise ConfigurationError(f"{element_id}: unknown elementType '{raw_type}'") from e
        hidden = data.get("hidden", False)
        if not isinstance(hidden, bool):
            raise ConfigurationError(f"{element_id}.hidden: expected true or false, got {hidden!r}")
        return cls(
            element_id=element_id,
            element_type=element_type,
            hidden=hidden,
            color_override=data.get("colorOverride") or None,
            background_override=data.get("backgroundOverride") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "elementId": self.element_id,
            "elementType": self.element_type.value,
            "hidden": self.hidden,
        }
        if self.color_override:
            data["colorOverride"] = self.color_override
        if self.background_override:
            data["backgroundOverride"] = self.background_override
        return data


def _infer_type(element_id: str) -> ElementType:
    """Best-effort element type for shorthand overrides that omit it."""
    if element_id == "header":
        return ElementType.HEADER
    if element_id.startswith("section-"):
        return ElementType.SECTION_TITLE if element_id.endswith("-title") else ElementType.SECTION
    if element_id == "summary":
        return ElementType.SUMMARY
    parts = element_id.split("-")
    item_types = {
        "experience": ElementType.EXPERIENCE_ITEM,
        "education": ElementType.EDUCATION_ITEM,
        "languages": ElementType.LANGUAGE_ITEM,
        "certifications": ElementType.CERTIFICATION_ITEM,
    }
    if len(parts) == 2 and parts[0] in item_types:
        return item_types[parts[0]]
    if parts[0] == "skills":
        return ElementType.SKILL_TAG if len(parts) == 3 else ElementType.SKILL_GROUP
    if parts[0] == "header":
        return ElementType.PHOTO if element_id == "header-photo" else ElementType.HEADER_FIELD
    if len(parts) == 3 and parts[0] == "experience" and parts[2].isdigit():
        return ElementType.HIGHLIGHT
    return ElementType.FIELD


@dataclass(frozen=True)
class OverrideSet:
    """
    Sparse overrides keyed by element id, with the time of the last edit.

    Key uniqueness makes two overrides for the same element impossible; when
    built from a list the last entry for an id wins.
    """
    overrides: Mapping[str, ElementOverride] = field(default_factory=dict)
    last_modified: datetime = field(default_factory=lambda: datetime.fromtimestamp(0, timezone.utc))

    def __post_init__(self):
        # Copy so a caller-owned dict cannot change underneath a compile.
        object.__setattr__(self, "overrides", dict(self.overrides))

    def __len__(self) -> int:
        return len(self.overrides)

    def __contains__(self, element_id: str) -> bool:
        return element_id in self.overrides

    def get(self, element_id: str) -> Optional[ElementOverride]:
        return self.overrides.get(element_id)

    def with_override(self, override: ElementOverride, when: Optional[datetime] = None) -> "OverrideSet":
        merged = dict(self.overrides)
        merged[override.element_id] = override
        return replace(self, overrides=merged, last_modified=when or datetime.now(timezone.utc))

    def without(self, element_id: str, when: Optional[datetime] = None) -> "OverrideSet":
        remaining = {k: v for k, v in self.overrides.items() if k != element_id}
        return replace(self, overrides=remaining, last_modified=when or datetime.now(timezone.utc))

    @classmethod
    def empty(cls) -> "OverrideSet":
        return cls()

    @classmethod
    def from_list(cls, overrides: Iterable[ElementOverride], last_modified: Optional[datetime] = None) -> "OverrideSet":
        keyed = {}
        for override in overrides:
            keyed[override.element_id] = override
        if last_modified is None:
            return cls(overrides=keyed)
        return cls(overrides=keyed, last_modified=last_modified)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "OverrideSet":
        """
        Accepts either the persisted shape ``{"overrides": [...], "lastModified": ...}``
        or a mapping keyed by element id.
        """
        if not data:
            return cls()
        last_modified = _parse_timestamp(data.get("lastModified"))
        if "overrides" in data:
            raw = data["overrides"] or ()
        else:
            raw = {k: v for k, v in data.items() if k != "lastModified"}
        if isinstance(raw, Mapping):
            items = [ElementOverride.from_dict(v, element_id=k) for k, v in raw.items()]
        else:
            items = [ElementOverride.from_dict(v) for v in raw]
        return cls.from_list(items, last_modified)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overrides": [o.to_dict() for o in self.overrides.values()],
            "lastModified": self.last_modified.isoformat(),
        }


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as e:
        raise ConfigurationError(f"overrides: invalid lastModified '{value}'") from e


@dataclass(frozen=True)
class ProtectionSettings:
    """Options for the preview-protected render mode."""
    watermark_text: str
    block_copy: bool = True
