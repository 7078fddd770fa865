"""Module entrypoint for ``python -m checkbox_workflow``."""
from __future__ import annotations

from checkbox_workflow.cli._dispatcher import main

if __name__ == "__main__":
    raise SystemExit(main())
