"""Module entrypoint for running pdfread as ``python -m pdfread``."""

from __future__ import annotations

from pdfread.cli import main


if __name__ == "__main__":
    main()
