"""Allow ``python -m deferred_apps``."""

from __future__ import annotations

import sys

from deferred_apps.cli import main

if __name__ == "__main__":
    sys.exit(main())
