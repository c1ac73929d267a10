"""Module entrypoint for running hebrew-itn as ``python -m hebrew_itn``."""

from __future__ import annotations

from hebrew_itn.cli import main


if __name__ == "__main__":
    main()
