#!/usr/bin/env python3
"""Generate a PPTX deck from a template and a JSON outline.

Usage:
  python3 scripts/generate_deck.py --template deck.pptx --outline outline.json [--output out.pptx]

The template's first slide is the title slide, the second the table of
contents, the last the closing slide; slides in between are cloned per
outline part/chapter and removed afterwards.
"""

from __future__ import annotations

from pptxfill.cli import run_cli


def main() -> None:
    run_cli()


if __name__ == "__main__":
    main()
