"""Error types raised by the custom logo services.

Messages are short machine codes; routes map them to HTTP statuses and
human-readable text.
"""
from __future__ import annotations

import errno
from pathlib import Path
from typing import Optional, Union


class LogoError(RuntimeError):
    def __init__(self, code: str, path: Optional[Union[str, Path]] = None):
        super().__init__(code)
        self.code = code
        self.path = str(path) if path is not None else None


class LogoNotFoundError(LogoError):
    """Override or original asset does not exist."""


class LogoPermissionError(LogoError):
    """The process may not read or write a path."""


class LogoIOError(LogoError):
    """Any other filesystem failure (disk full, bad descriptor, ...)."""


class HashValidationError(ValueError):
    """Hash segment of an intercepted path is not plain alphanumeric."""


_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM, errno.EROFS}


def translate_os_error(exc: OSError, path: Optional[Union[str, Path]] = None) -> LogoError:
    target = path if path is not None else exc.filename
    if isinstance(exc, FileNotFoundError):
        return LogoNotFoundError("not_found", target)
    if isinstance(exc, PermissionError) or exc.errno in _PERMISSION_ERRNOS:
        return LogoPermissionError("permission_denied", target)
    return LogoIOError(exc.strerror or str(exc) or "io_error", target)


__all__ = [
    "LogoError",
    "LogoNotFoundError",
    "LogoPermissionError",
    "LogoIOError",
    "HashValidationError",
    "translate_os_error",
]
