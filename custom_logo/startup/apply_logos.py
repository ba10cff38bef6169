"""Apply stored custom logos to the web bundle once and exit.

Meant for container entrypoints that refresh the bundle before the host
starts (the bundle is replaced on every image upgrade).

Usage
-----
  custom-logo-apply [--store-dir PATH] [--web-path PATH]
                    [--originals-dir PATH | --no-backup] [--json]

Paths default to the CUSTOM_LOGO_* environment variables.

Exit Codes
----------
0 - distribution ran (or was skipped) without per-file failures
1 - one or more files could not be written
2 - invalid arguments / missing web path
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from custom_logo import config as app_config
from custom_logo.services.distribution import LogoDistributor
from custom_logo.services.override_store import OverrideStore
from custom_logo.services.roles import default_role_table


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Copy custom logos onto the web bundle")
    parser.add_argument("--store-dir", default=None, help="override directory (CUSTOM_LOGO_DIR)")
    parser.add_argument("--web-path", default=None, help="web bundle root (CUSTOM_LOGO_WEB_PATH)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--originals-dir", default=None, help="backup dir for pristine originals")
    group.add_argument("--no-backup", action="store_true", help="overwrite without keeping originals")
    parser.add_argument("--json", action="store_true", help="print the report as JSON")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    web_path = args.web_path or app_config.web_path()
    if not web_path:
        print("[CUSTOM-LOGO] web path not configured (use --web-path or CUSTOM_LOGO_WEB_PATH)", file=sys.stderr)
        return 2
    originals = None
    if not args.no_backup and app_config.backup_originals():
        originals = args.originals_dir or app_config.originals_dir()

    roles = default_role_table()
    store = OverrideStore(args.store_dir or app_config.store_dir(), roles)
    report = LogoDistributor(store, web_path, roles, originals_dir=originals).distribute()

    summary = report.summary()
    if args.json:
        print(json.dumps(summary, indent=2, sort_keys=True))
    elif report.skipped:
        print(f"[CUSTOM-LOGO] skipped ({report.skipped})")
    else:
        for role, result in summary["roles"].items():  # type: ignore[union-attr]
            print(
                f"[CUSTOM-LOGO] {role}: matched={result['matched']} copied={result['copied']} "
                f"restored={result['restored']} failed={result['failed']}"
            )
    return 0 if report.ok else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
