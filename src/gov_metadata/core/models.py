"""Shared data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Literal, Mapping, TypeAlias, Union

JsonValue: TypeAlias = Union[None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"]]
RawMetadata: TypeAlias = Any
EntityKind = Literal["drep", "action"]
SortDirection = Literal["Ascending", "Descending"]
StorageProvider = Literal["pinata", "blockfrost"]


class _Undefined:
    """Marker for "no value", distinct from an explicit JSON ``null``."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final[_Undefined] = _Undefined()
Undefined: TypeAlias = _Undefined

IDENTITY_FIELDS: Final[tuple[str, ...]] = ("name", "title", "description", "website")

# Attribute name -> key used in the flat profile mapping handed to views.
PROFILE_WIRE_KEYS: Final[dict[str, str]] = {
    "name": "name",
    "title": "title",
    "description": "description",
    "website": "website",
    "email": "email",
    "twitter": "twitter",
    "github": "github",
    "image": "image",
    "payment_address": "paymentAddress",
    "do_not_list": "doNotList",
    "objectives": "objectives",
    "motivations": "motivations",
    "qualifications": "qualifications",
    "references": "references",
}


@dataclass(slots=True, frozen=True)
class ProfileReference:
    type: str
    label: str
    uri: str

    def as_dict(self) -> dict[str, str]:
        return {"@type": self.type, "label": self.label, "uri": self.uri}


@dataclass(slots=True, frozen=True)
class CanonicalProfile:
    """Flattened, display-ready representation of any supported metadata variant."""

    name: str | None = None
    title: str | None = None
    description: str | None = None
    website: str | None = None
    email: str | None = None
    twitter: str | None = None
    github: str | None = None
    image: str | None = None
    payment_address: str | None = None
    do_not_list: bool | None = None
    objectives: str | None = None
    motivations: str | None = None
    qualifications: str | None = None
    references: tuple[ProfileReference, ...] = ()

    @classmethod
    def from_fields(cls, values: Mapping[str, Any]) -> "CanonicalProfile":
        known = {key: value for key, value in values.items() if key in PROFILE_WIRE_KEYS}
        if "references" in known:
            known["references"] = tuple(known["references"] or ())
        return cls(**known)

    @property
    def is_present(self) -> bool:
        """True when the profile carries a usable display identity."""
        for attribute in IDENTITY_FIELDS:
            value = getattr(self, attribute)
            if isinstance(value, str) and value.strip():
                return True
        return False

    @property
    def has_name_or_title(self) -> bool:
        return bool((self.name or "").strip() or (self.title or "").strip())

    @property
    def display_name(self) -> str | None:
        for value in (self.name, self.title):
            if value and value.strip():
                return value.strip()
        return None

    def set_fields(self) -> dict[str, Any]:
        """Return the attributes that carry a value, keyed by attribute name."""
        values: dict[str, Any] = {}
        for attribute in PROFILE_WIRE_KEYS:
            value = getattr(self, attribute)
            if value is None or value == ():
                continue
            values[attribute] = value
        return values

    def is_empty(self) -> bool:
        return not self.set_fields()

    def merged_over(self, base: "CanonicalProfile | None") -> "CanonicalProfile":
        """Shallow-merge this profile on top of ``base``; this profile wins on conflict."""
        if base is None:
            return self
        return CanonicalProfile.from_fields({**base.set_fields(), **self.set_fields()})

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for attribute, value in self.set_fields().items():
            if attribute == "references":
                value = [reference.as_dict() for reference in value]
            payload[PROFILE_WIRE_KEYS[attribute]] = value
        return payload


@dataclass(slots=True)
class Entity:
    """A DRep or governance action as listed by the indexer."""

    entity_id: str
    kind: EntityKind = "drep"
    metadata: RawMetadata = None
    given_name: str | None = None
    has_profile: bool | None = None
    profile: CanonicalProfile | None = None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class PageQuery:
    page: int = 1
    page_size: int = 20
    search: str | None = None
    statuses: tuple[str, ...] = ()
    sort: str | None = None
    direction: SortDirection | None = None


@dataclass(slots=True)
class EntityPage:
    entities: list[Entity] = field(default_factory=list)
    has_more: bool = False
    total: int | None = None


@dataclass(slots=True, frozen=True)
class AnchorUpload:
    url: str
    hash: str
