"""Push distribution of override images into the web bundle.

For each role the web root is scanned for files whose names match the
role's patterns (including hashed build variants) and the override bytes
are copied onto every match. Only existing files are touched.

When an originals directory is configured, the first overwrite of a file
stores a pristine copy there (mirroring the file's path relative to the web
root). A role without an override gets those copies put back, which is how
deleting an override undoes a previous push. A target that no longer holds
the override bytes is treated as a fresh original and backed up again, and
backups whose bundle file has disappeared are dropped on restore.
"""
from __future__ import annotations

import filecmp
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from custom_logo.services.override_store import OverrideStore
from custom_logo.services.roles import LogoRole, RoleSpec, RoleTable
from custom_logo.utils.logging import get_logger

LOG = get_logger("distribution")


@dataclass
class RoleResult:
    role: LogoRole
    matched: int = 0
    copied: List[str] = field(default_factory=list)
    restored: List[str] = field(default_factory=list)
    pruned: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)
    skipped: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = {
            "matched": self.matched,
            "copied": len(self.copied),
            "restored": len(self.restored),
            "failed": len(self.failures),
        }
        if self.pruned:
            out["pruned"] = len(self.pruned)
        if self.skipped:
            out["skipped"] = self.skipped
        if self.failures:
            out["failures"] = [{"path": p, "error": e} for p, e in self.failures]
        return out


@dataclass
class DistributionReport:
    results: Dict[LogoRole, RoleResult] = field(default_factory=dict)
    skipped: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not any(r.failures for r in self.results.values())

    @property
    def failures(self) -> List[Tuple[str, str]]:
        out: List[Tuple[str, str]] = []
        for result in self.results.values():
            out.extend(result.failures)
        return out

    def summary(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "ok": self.ok,
            "roles": {role.value: r.to_dict() for role, r in self.results.items()},
        }
        if self.skipped:
            payload["skipped"] = self.skipped
        return payload


class LogoDistributor:
    def __init__(
        self,
        store: OverrideStore,
        web_root: Optional[Union[str, Path]],
        roles: RoleTable,
        originals_dir: Optional[Union[str, Path]] = None,
    ):
        self.store = store
        self.web_root = Path(web_root) if web_root else None
        self.roles = roles
        self.originals_dir = Path(originals_dir) if originals_dir else None

    # ------------------------------------------------------------------ scan
    def _is_excluded(self, directory: Path) -> bool:
        if self.originals_dir is None:
            return False
        try:
            return directory.resolve() == self.originals_dir.resolve()
        except OSError:  # pragma: no cover - broken symlink
            return False

    def find_targets(self, role: LogoRole) -> List[Path]:
        spec = self.roles.get(role)
        if self.web_root is None or not self.web_root.is_dir():
            return []
        found: List[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.web_root):
            current = Path(dirpath)
            dirnames[:] = sorted(d for d in dirnames if not self._is_excluded(current / d))
            for name in sorted(filenames):
                if not spec.matches(name):
                    continue
                candidate = current / name
                if candidate.is_file() and not candidate.is_symlink():
                    found.append(candidate)
        return found

    # --------------------------------------------------------------- checks
    def _web_root_problem(self) -> Optional[str]:
        if self.web_root is None:
            return "web_path_unset"
        if not self.web_root.is_dir():
            return "web_path_missing"
        if not os.access(self.web_root, os.W_OK):
            return "web_path_not_writable"
        return None

    def _backup_path(self, target: Path) -> Optional[Path]:
        if self.originals_dir is None or self.web_root is None:
            return None
        return self.originals_dir / target.relative_to(self.web_root)

    # ---------------------------------------------------------------- apply
    @staticmethod
    def _needs_backup(source: Path, target: Path, backup: Path) -> bool:
        if not backup.exists():
            return True
        # A target that no longer holds the override was rebuilt by the host.
        return not filecmp.cmp(source, target, shallow=False)

    def _push_role(self, spec: RoleSpec, targets: List[Path], result: RoleResult) -> None:
        source = self.store.path_for(spec.role)
        for target in targets:
            try:
                backup = self._backup_path(target)
                if backup is not None and self._needs_backup(source, target, backup):
                    backup.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(target, backup)
                    LOG.debug("original backed up %s -> %s", target, backup)
                shutil.copyfile(source, target)
                result.copied.append(str(target))
            except PermissionError as exc:
                LOG.error("permission denied while copying %s to %s: %s", spec.filename, target, exc)
                result.failures.append((str(target), "permission_denied"))
            except OSError as exc:
                LOG.error("io error while copying %s to %s: %s", spec.filename, target, exc)
                result.failures.append((str(target), exc.strerror or str(exc)))

    def _restore_role(self, spec: RoleSpec, targets: List[Path], result: RoleResult) -> None:
        if self.originals_dir is None:
            return
        for target in targets:
            backup = self._backup_path(target)
            if backup is None or not backup.is_file():
                continue
            try:
                shutil.copyfile(backup, target)
                backup.unlink()
                result.restored.append(str(target))
            except PermissionError as exc:
                LOG.error("permission denied while restoring %s: %s", target, exc)
                result.failures.append((str(target), "permission_denied"))
            except OSError as exc:
                LOG.error("io error while restoring %s: %s", target, exc)
                result.failures.append((str(target), exc.strerror or str(exc)))
        self._prune_backups(spec, targets, result)

    def _prune_backups(self, spec: RoleSpec, targets: List[Path], result: RoleResult) -> None:
        """Drop backups whose bundle file is gone (old hashed names)."""
        if self.originals_dir is None or not self.originals_dir.is_dir():
            return
        live = {self._backup_path(t) for t in targets}
        for dirpath, _dirnames, filenames in os.walk(self.originals_dir):
            for name in sorted(filenames):
                backup = Path(dirpath) / name
                if not spec.matches(name) or backup in live:
                    continue
                try:
                    backup.unlink()
                    result.pruned.append(str(backup))
                    LOG.info("stale backup removed %s", backup)
                except OSError as exc:
                    LOG.warning("failed removing stale backup %s: %s", backup, exc)

    def distribute_role(self, role: LogoRole) -> RoleResult:
        spec = self.roles.get(role)
        result = RoleResult(role=role)
        patterns = ", ".join(str(p) for p in spec.patterns)
        try:
            targets = self.find_targets(role)
        except OSError as exc:
            LOG.error("scan failed role=%s web_root=%s err=%s", role.value, self.web_root, exc)
            result.failures.append((str(self.web_root), exc.strerror or str(exc)))
            return result
        result.matched = len(targets)
        if not targets:
            LOG.warning("no destination files found role=%s patterns=%s", role.value, patterns)
            if not self.store.exists(role):
                self._prune_backups(spec, targets, result)
            return result
        if self.store.exists(role):
            LOG.info("distributing override role=%s file=%s targets=%d", role.value, spec.filename, len(targets))
            self._push_role(spec, targets, result)
        elif self.originals_dir is not None:
            self._restore_role(spec, targets, result)
        else:
            result.skipped = "no_override"
        LOG.info(
            "distribution role=%s matched=%d copied=%d restored=%d failed=%d",
            role.value,
            result.matched,
            len(result.copied),
            len(result.restored),
            len(result.failures),
        )
        return result

    def distribute(self, roles: Optional[Iterable[LogoRole]] = None) -> DistributionReport:
        report = DistributionReport()
        if not self.store.is_available():
            LOG.info("override directory not found at %s, skipping distribution", self.store.directory)
            report.skipped = "store_missing"
            return report
        problem = self._web_root_problem()
        if problem:
            LOG.warning("web path unusable (%s) path=%s, skipping distribution", problem, self.web_root)
            report.skipped = problem
            return report
        selected = list(roles) if roles is not None else list(self.roles.roles())
        for role in selected:
            report.results[role] = self.distribute_role(role)
        if report.ok:
            LOG.info("logo distribution completed roles=%s", ",".join(r.value for r in selected))
        else:
            LOG.warning("logo distribution completed with %d failed file(s)", len(report.failures))
        return report


__all__ = ["LogoDistributor", "DistributionReport", "RoleResult"]
