"""Fixtures that build small template decks in-process with python-pptx."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest
from PIL import Image
from pptx import Presentation
from pptx.util import Inches, Pt

BLANK_LAYOUT = 6

TITLE_TEXTS = ["{ppt_title}", "{ppt_subtitle}", "{ppt_author}", "{ppt_website}"]
TOC_TEXTS = ["{part_title_1}", "{part_title_2}", "{part_title_3}", "{p1}", "{p2}", "{p3}"]
PART_TEXTS = ["{part_title_1}", "{part_subtitle_1}"]
CLOSING_TEXTS = ["{end_title}", "{ppt_author}", "{ppt_website}"]


def chapter_texts(section_count: int) -> list[str]:
    texts = ["{chapter_title}", "{chapter_subtitle}"]
    for i in range(1, section_count + 1):
        texts += [f"{{s{i}}}", f"{{section_title_{i}}}", f"{{section_subtitle_{i}}}", f"{{item_{i}_1}}"]
    return texts


def png_bytes(color: tuple[int, int, int] = (200, 30, 30), size: int = 8) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (size, size), color).save(buf, format="PNG")
    return buf.getvalue()


def add_text_slide(prs, texts: Sequence[str], *, image: Optional[bytes] = None):
    slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT])
    for idx, text in enumerate(texts):
        box = slide.shapes.add_textbox(Inches(0.5), Inches(0.3 + 0.5 * idx), Inches(6), Inches(0.4))
        box.text_frame.text = text
        box.text_frame.paragraphs[0].runs[0].font.size = Pt(20)
    if image is not None:
        slide.shapes.add_picture(io.BytesIO(image), Inches(7), Inches(1), Inches(1), Inches(1))
    return slide


def media_partnames(prs) -> set[str]:
    return {str(p.partname) for p in prs.part.package.iter_parts() if str(p.partname).startswith("/ppt/media/")}


def shape_texts(slide) -> list[str]:
    return [shape.text_frame.text for shape in slide.shapes if shape.has_text_frame]


@pytest.fixture
def blank_prs():
    return Presentation()


@pytest.fixture
def make_template(tmp_path: Path) -> Callable[..., Path]:
    """Build a template: title, TOC, part/chapter scaffolding, closing slide."""

    def _make(
        *,
        name: str = "template.pptx",
        part_templates: int = 1,
        chapter_section_counts: Sequence[int] = (1,),
        part_image: Optional[bytes] = None,
        closing: bool = True,
    ) -> Path:
        prs = Presentation()
        add_text_slide(prs, TITLE_TEXTS)
        add_text_slide(prs, TOC_TEXTS)
        for _ in range(part_templates):
            add_text_slide(prs, PART_TEXTS, image=part_image)
        for count in chapter_section_counts:
            add_text_slide(prs, chapter_texts(count))
        if closing:
            add_text_slide(prs, CLOSING_TEXTS)
        path = tmp_path / name
        prs.save(str(path))
        return path

    return _make
