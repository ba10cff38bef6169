#!/usr/bin/env python3
"""apply_custom_logos.py

Container entrypoint step: copy the stored custom logos onto the freshly
unpacked web bundle before the host starts. Thin wrapper around
``custom_logo.startup.apply_logos`` so the step works from a source checkout
without installing the package.
"""

from __future__ import annotations

import os
import sys

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from custom_logo.startup.apply_logos import main  # noqa: E402


if __name__ == "__main__":
    try:
        sys.exit(main())
    except SystemExit:
        raise
    except Exception as exc:
        print(f"[CUSTOM-LOGO] unexpected error: {exc}", file=sys.stderr)
        sys.exit(1)
