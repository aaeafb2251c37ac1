"""Module entrypoint for `python -m eezsuit`."""

from __future__ import annotations

from eezsuit.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
