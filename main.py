"""Development entrypoint (without installing the package).

Runs the CLI with `python main.py ...`; the code lives under `src/`, so the
directory is put on `sys.path` when the package is not installed.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    project_root = Path(__file__).resolve().parent
    src = project_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from apiconsole.cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
