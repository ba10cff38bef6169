"""Serve-on-read resolution for intercepted asset paths.

Maps a request path to a logo role and decides what to serve: the
override from the store when one is set, otherwise the original bundle file.
Hashed paths (``icon-transparent.<hash>.png``) have their hash segment
validated before it is used to build a filesystem path. Top-level files
named like a role's push targets (``touchicon72.png``, ``favicon.png``) are
shadowed as well, so both modes cover the same assets.
"""
from __future__ import annotations

import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from custom_logo.services.errors import LogoNotFoundError
from custom_logo.services.override_store import OverrideStore
from custom_logo.services.roles import HASH_PLACEHOLDER, LogoRole, RoleTable, validate_hash_segment
from custom_logo.utils.logging import get_logger

LOG = get_logger("interception")

DEFAULT_MIMETYPE = "image/png"
SOURCE_OVERRIDE = "override"
SOURCE_ORIGINAL = "original"


@dataclass(frozen=True)
class InterceptMatch:
    role: LogoRole
    relative_path: str
    hash_segment: Optional[str] = None


@dataclass(frozen=True)
class ResolvedAsset:
    role: LogoRole
    source: str
    path: Path
    mimetype: str


def _compile_template(template: str) -> Tuple[Optional["re.Pattern[str]"], str]:
    if HASH_PLACEHOLDER not in template:
        return None, template
    before, after = template.split(HASH_PLACEHOLDER, 1)
    # Captures anything between the fixed parts; validate_hash_segment filters it.
    return re.compile(re.escape(before) + r"(?P<hash>.+)" + re.escape(after)), template


class AssetInterceptor:
    def __init__(
        self,
        store: OverrideStore,
        roles: RoleTable,
        web_root: Optional[Union[str, Path]],
        url_prefix: str = "/web",
    ):
        self.store = store
        self.roles = roles
        self.web_root = Path(web_root) if web_root else None
        self.url_prefix = url_prefix.rstrip("/")
        self._exact: dict[str, LogoRole] = {}
        self._hashed: List[Tuple["re.Pattern[str]", str, LogoRole]] = []
        for spec in roles:
            for template in spec.intercept_paths:
                regex, raw = _compile_template(template.lstrip("/"))
                if regex is None:
                    self._exact[raw] = spec.role
                else:
                    self._hashed.append((regex, raw, spec.role))

    def _relative(self, request_path: str) -> Optional[str]:
        if self.url_prefix:
            if not request_path.startswith(self.url_prefix + "/"):
                return None
            request_path = request_path[len(self.url_prefix):]
        return request_path.lstrip("/")

    def match(self, request_path: str) -> Optional[InterceptMatch]:
        """Return the intercept match for ``request_path`` or None.

        Raises HashValidationError when the path has the shape of a hashed
        variant but the hash segment is not plain alphanumeric.
        """
        relative = self._relative(request_path or "")
        if not relative:
            return None
        role = self._exact.get(relative)
        if role is not None:
            return InterceptMatch(role=role, relative_path=relative)
        for regex, template, role in self._hashed:
            found = regex.fullmatch(relative)
            if not found:
                continue
            segment = validate_hash_segment(found.group("hash"))
            return InterceptMatch(
                role=role,
                relative_path=template.replace(HASH_PLACEHOLDER, segment),
                hash_segment=segment,
            )
        return self._match_bundle_name(relative)

    def _match_bundle_name(self, relative: str) -> Optional[InterceptMatch]:
        # Top-level bundle files use the same names push mode rewrites.
        if "/" in relative:
            return None
        for spec in self.roles:
            if spec.matches(relative):
                return InterceptMatch(role=spec.role, relative_path=relative)
        return None

    def _original_path(self, match: InterceptMatch) -> Optional[Path]:
        if self.web_root is None:
            return None
        root = self.web_root.resolve()
        target = (root / match.relative_path).resolve()
        if root != target and root not in target.parents:
            LOG.warning("original path escapes web root path=%s", target)
            return None
        return target

    def resolve(self, match: InterceptMatch) -> ResolvedAsset:
        mimetype = mimetypes.guess_type(match.relative_path)[0] or DEFAULT_MIMETYPE
        if self.store.exists(match.role):
            return ResolvedAsset(
                role=match.role,
                source=SOURCE_OVERRIDE,
                path=self.store.path_for(match.role),
                mimetype=mimetype,
            )
        original = self._original_path(match)
        if original is not None and original.is_file():
            return ResolvedAsset(role=match.role, source=SOURCE_ORIGINAL, path=original, mimetype=mimetype)
        raise LogoNotFoundError("asset_missing", match.relative_path)


__all__ = [
    "AssetInterceptor",
    "InterceptMatch",
    "ResolvedAsset",
    "SOURCE_OVERRIDE",
    "SOURCE_ORIGINAL",
]
