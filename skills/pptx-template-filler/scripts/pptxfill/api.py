"""Public API helpers for programmatic deck generation."""

from __future__ import annotations

import logging
import random
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from .generator import TemplateDeckGenerator
from .outline import Outline
from .validation import load_outline_file, parse_outline_text

logger = logging.getLogger(__name__)


def default_output_path(template_path: Path, now: Optional[datetime] = None) -> Path:
    """``<template dir>/output/<stem>_modified_<timestamp><ext>``; creates ``output/``."""
    template_path = Path(template_path)
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    output_dir = template_path.parent / "output"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / f"{template_path.stem}_modified_{stamp}{template_path.suffix}"


def _generate(template_path: Path, outline: Outline, output_path: Optional[Path], rng: Optional[random.Random]) -> Path:
    output = Path(output_path) if output_path else default_output_path(template_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(template_path, output)
    logger.info("Created %s from %s", output, template_path)

    try:
        generator = TemplateDeckGenerator(str(output), outline, rng=rng)
        generator.generate()
        return generator.save(str(output))
    except Exception:
        logger.warning("Generation failed, removing %s", output)
        output.unlink(missing_ok=True)
        raise


def _check_template(template_path: Path) -> Path:
    template_path = Path(template_path)
    if not template_path.is_file():
        raise FileNotFoundError(f"Template not found: {template_path}")
    return template_path


def generate(
    template_path: Path,
    outline_json_text: str,
    output_path: Optional[Path] = None,
    *,
    rng: Optional[random.Random] = None,
) -> Path:
    """Generate a deck from a template and outline JSON text; return the written path.

    The template is copied to ``output_path`` first and only the copy is
    edited. On failure the partially written output is removed.
    """
    template_path = _check_template(template_path)
    outline = Outline.from_dict(parse_outline_text(outline_json_text))
    return _generate(template_path, outline, output_path, rng)


def generate_from_files(
    template_path: Path,
    outline_path: Path,
    output_path: Optional[Path] = None,
    *,
    rng: Optional[random.Random] = None,
) -> Path:
    """Same as :func:`generate`, reading the outline from a JSON file."""
    template_path = _check_template(template_path)
    outline = Outline.from_dict(load_outline_file(Path(outline_path)))
    return _generate(template_path, outline, output_path, rng)
