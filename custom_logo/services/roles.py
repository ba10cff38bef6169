"""Logo roles and the table describing where each role lives.

A role is one logical branding image. The table maps each role to its
canonical override filename, the upload form field, the status key, the
filename patterns used to find copies in the web bundle, and the request
paths the interception hook shadows.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from custom_logo.services.errors import HashValidationError

HASH_PLACEHOLDER = "{hash}"
MAX_HASH_LENGTH = 64
_HASH_RE = re.compile(r"[A-Za-z0-9]+")


class LogoRole(str, Enum):
    ICON = "icon"
    BANNER_DARK = "banner-dark"
    BANNER_LIGHT = "banner-light"


def validate_hash_segment(value: str) -> str:
    """Return ``value`` if it is a safe fingerprint segment.

    Only ASCII letters and digits are accepted, so the segment can never
    introduce separators, dots or traversal sequences into a path.
    """
    if not isinstance(value, str) or not value:
        raise HashValidationError("hash_empty")
    if len(value) > MAX_HASH_LENGTH:
        raise HashValidationError("hash_too_long")
    if not _HASH_RE.fullmatch(value):
        raise HashValidationError("hash_invalid")
    return value


@dataclass(frozen=True)
class MatchPattern:
    """``<stem><suffix>`` optionally with ``.<alnum hash>`` before the suffix.

    With ``sized`` set, an alphanumeric size tag may follow the stem directly
    (``touchicon72.png``, ``favicon32.a1b2.png``).
    """

    stem: str
    suffix: str = ".png"
    sized: bool = False
    _regex: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        size = r"[A-Za-z0-9]*" if self.sized else ""
        regex = re.compile(re.escape(self.stem) + size + r"(?:\.[A-Za-z0-9]+)?" + re.escape(self.suffix))
        object.__setattr__(self, "_regex", regex)

    def matches(self, filename: str) -> bool:
        return self._regex.fullmatch(filename) is not None

    def __str__(self) -> str:
        size = "[<size>]" if self.sized else ""
        return f"{self.stem}{size}[.<hash>]{self.suffix}"


@dataclass(frozen=True)
class RoleSpec:
    role: LogoRole
    filename: str
    form_field: str
    status_key: str
    patterns: Tuple[MatchPattern, ...]
    intercept_paths: Tuple[str, ...] = ()

    @property
    def slug(self) -> str:
        return self.role.value

    def matches(self, filename: str) -> bool:
        return any(p.matches(filename) for p in self.patterns)


class RoleTable:
    """Ordered, read-only collection of :class:`RoleSpec` entries."""

    def __init__(self, specs: Tuple[RoleSpec, ...]):
        self._specs: Dict[LogoRole, RoleSpec] = {}
        for spec in specs:
            if spec.role in self._specs:
                raise ValueError(f"duplicate role {spec.role.value}")
            self._specs[spec.role] = spec

    def __iter__(self) -> Iterator[RoleSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, role: object) -> bool:
        return role in self._specs

    def get(self, role: LogoRole) -> RoleSpec:
        try:
            return self._specs[role]
        except KeyError:
            raise KeyError(f"unknown role {role!r}") from None

    def roles(self) -> Tuple[LogoRole, ...]:
        return tuple(self._specs.keys())

    def by_slug(self, slug: str) -> Optional[RoleSpec]:
        for spec in self._specs.values():
            if spec.slug == slug:
                return spec
        return None

    def by_form_field(self, name: str) -> Optional[RoleSpec]:
        for spec in self._specs.values():
            if spec.form_field == name:
                return spec
        return None


def default_role_table() -> RoleTable:
    return RoleTable((
        RoleSpec(
            role=LogoRole.ICON,
            filename="icon-transparent.png",
            form_field="Logo",
            status_key="iconSet",
            patterns=(
                MatchPattern("icon-transparent"),
                MatchPattern("touchicon", sized=True),
                MatchPattern("favicon", sized=True),
            ),
            intercept_paths=(
                "assets/img/icon-transparent.png",
                "icon-transparent.{hash}.png",
            ),
        ),
        RoleSpec(
            role=LogoRole.BANNER_DARK,
            filename="banner-dark.png",
            form_field="BannerDark",
            status_key="bannerDarkSet",
            patterns=(MatchPattern("banner-dark"),),
            intercept_paths=(
                "assets/img/banner-dark.png",
                "banner-dark.{hash}.png",
            ),
        ),
        RoleSpec(
            role=LogoRole.BANNER_LIGHT,
            filename="banner-light.png",
            form_field="BannerLight",
            status_key="bannerLightSet",
            patterns=(MatchPattern("banner-light"),),
            intercept_paths=(
                "assets/img/banner-light.png",
                "banner-light.{hash}.png",
            ),
        ),
    ))


__all__ = [
    "HASH_PLACEHOLDER",
    "LogoRole",
    "MatchPattern",
    "RoleSpec",
    "RoleTable",
    "default_role_table",
    "validate_hash_segment",
]
