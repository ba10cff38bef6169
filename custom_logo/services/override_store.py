"""Override store.

A single directory holding at most one image per logo role, under the
role's canonical filename. Absence of the file means "no override". The
directory is created on the first write; reads never create it.
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Dict, Union

from custom_logo.services.errors import LogoNotFoundError, translate_os_error
from custom_logo.services.roles import LogoRole, RoleTable
from custom_logo.utils.logging import get_logger

LOG = get_logger("override_store")

CHUNK_SIZE = 1024 * 1024


class OverrideStore:
    def __init__(self, directory: Union[str, Path], roles: RoleTable):
        self.directory = Path(directory)
        self.roles = roles

    def __repr__(self) -> str:
        return f"OverrideStore({str(self.directory)!r})"

    def path_for(self, role: LogoRole) -> Path:
        return self.directory / self.roles.get(role).filename

    def is_available(self) -> bool:
        return self.directory.is_dir()

    def _ensure_dir(self) -> None:
        try:
            self.directory.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            LOG.error("failed to ensure override dir=%s err=%s", self.directory, exc)
            raise translate_os_error(exc, self.directory) from exc

    def save(self, role: LogoRole, data: Union[bytes, BinaryIO]) -> Path:
        """Write ``data`` as the override for ``role``, replacing any prior file."""
        self._ensure_dir()
        target = self.path_for(role)
        tmp_path = None
        try:
            tmp_fd, tmp_path = tempfile.mkstemp(dir=str(self.directory), prefix=".upload-", suffix=".tmp")
            with os.fdopen(tmp_fd, "wb") as fh:
                if isinstance(data, (bytes, bytearray, memoryview)):
                    fh.write(data)
                else:
                    for chunk in iter(lambda: data.read(CHUNK_SIZE), b""):
                        fh.write(chunk)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, target)
            tmp_path = None
        except OSError as exc:
            LOG.error("failed saving override role=%s path=%s err=%s", role.value, target, exc)
            raise translate_os_error(exc, target) from exc
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
        LOG.info("override saved role=%s path=%s", role.value, target)
        return target

    def delete(self, role: LogoRole) -> None:
        target = self.path_for(role)
        try:
            target.unlink()
        except FileNotFoundError:
            raise LogoNotFoundError("override_missing", target) from None
        except OSError as exc:
            LOG.error("failed removing override role=%s path=%s err=%s", role.value, target, exc)
            raise translate_os_error(exc, target) from exc
        LOG.info("override removed role=%s path=%s", role.value, target)

    def exists(self, role: LogoRole) -> bool:
        return self.path_for(role).is_file()

    def read(self, role: LogoRole) -> bytes:
        target = self.path_for(role)
        try:
            with target.open("rb") as fh:
                return fh.read()
        except FileNotFoundError:
            raise LogoNotFoundError("override_missing", target) from None
        except OSError as exc:
            LOG.error("failed reading override role=%s path=%s err=%s", role.value, target, exc)
            raise translate_os_error(exc, target) from exc

    def status(self) -> Dict[str, bool]:
        return {spec.status_key: self.exists(spec.role) for spec in self.roles}


__all__ = ["OverrideStore"]
