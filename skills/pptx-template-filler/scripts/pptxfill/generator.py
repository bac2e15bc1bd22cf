"""Template deck generator - fills a template deck from a JSON outline.

The template's first slide is the title slide, its second slide the table of
contents and its last slide the closing slide. Every slide in between is
scaffolding: part slides (containing ``{part_subtitle_...}``) and chapter
slides (containing ``{chapter_title}`` and a fixed number of
``{section_title_N}`` placeholders) are cloned once per outline entry and
filled in, then the scaffolding is deleted.
"""

from __future__ import annotations

import logging
import random
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from pptx import Presentation

from .cloning import clone_slide, delete_slide_range
from .errors import TemplateContractError
from .media import cleanup_unused_media, deduplicate_media
from .outline import Chapter, Outline, Part
from .selection import TemplatePool
from .text import (
    delete_shape,
    delete_shapes_containing,
    iter_text_shapes,
    set_shape_text,
    shape_text,
    slide_contains,
    slide_text,
    substitute_slide,
)
from .validation import parse_outline_text

logger = logging.getLogger(__name__)

PART_TITLE_TOKEN = "{part_title_"
PART_SUBTITLE_TOKEN = "{part_subtitle_"
CHAPTER_TITLE_TOKEN = "{chapter_title}"
CHAPTER_SUBTITLE_TOKEN = "{chapter_subtitle}"

_TOC_TITLE_RE = re.compile(r"\{part_title_(\d+)\}", re.IGNORECASE)
_TOC_INDEX_RE = re.compile(r"\{p(\d+)\}", re.IGNORECASE)


def _section_title_token(index: int) -> str:
    return f"{{section_title_{index}}}"


class TemplateDeckGenerator:
    """Generate a deck from a template file and an outline."""

    def __init__(self, template_path: str, outline: Outline, *, rng: Optional[random.Random] = None):
        self.template_path = Path(template_path)
        self.outline = outline
        self.rng = rng or random.Random()
        self.prs = Presentation(str(self.template_path))

    @classmethod
    def from_dict(
        cls, template_path: str, outline: Dict[str, Any], *, rng: Optional[random.Random] = None
    ) -> "TemplateDeckGenerator":
        return cls(template_path, Outline.from_dict(outline), rng=rng)

    @classmethod
    def from_json(
        cls, template_path: str, outline_text: str, *, rng: Optional[random.Random] = None
    ) -> "TemplateDeckGenerator":
        return cls.from_dict(template_path, parse_outline_text(outline_text), rng=rng)

    def generate(self) -> Presentation:
        slides = list(self.prs.slides)
        if len(slides) < 2:
            raise TemplateContractError(
                f"Template must have at least 2 slides (title and table of contents), found {len(slides)}"
            )

        original_last_index = len(slides) - 1
        logger.info("Template %s has %d slides", self.template_path.name, len(slides))

        self._fill_title_slide(slides[0])
        self._fill_toc_slide(slides[1])
        self._generate_part_slides()
        self._generate_closing_slide(slides[original_last_index])

        delete_slide_range(self.prs, 2, original_last_index)

        deduplicate_media(self.prs)
        cleanup_unused_media(self.prs)
        return self.prs

    def save(self, output_path: str) -> Path:
        output = Path(output_path)
        output.parent.mkdir(parents=True, exist_ok=True)
        self.prs.save(str(output))
        logger.info("Deck saved to %s", output)
        return output

    # --- front slides -------------------------------------------------

    def _fill_title_slide(self, slide) -> None:
        replaced = substitute_slide(slide, self.outline.title_replacements())
        logger.info("Replaced %d placeholders on the title slide", replaced)

    def _fill_toc_slide(self, slide) -> None:
        titles = self.outline.part_titles
        title_shapes: Dict[int, Any] = {}
        index_shapes: Dict[int, Any] = {}

        for sp in iter_text_shapes(slide):
            text = shape_text(sp)
            match = _TOC_TITLE_RE.search(text)
            if match:
                title_shapes[int(match.group(1))] = sp
            match = _TOC_INDEX_RE.search(text)
            if match:
                index_shapes[int(match.group(1))] = sp

        logger.debug("TOC has %d title and %d index placeholders", len(title_shapes), len(index_shapes))

        for i in range(1, max([len(titles), *title_shapes]) + 1):
            sp = title_shapes.get(i)
            if sp is None:
                if i <= len(titles):
                    logger.debug("No TOC placeholder for part %d (%r)", i, titles[i - 1])
                continue
            if i <= len(titles):
                set_shape_text(sp, titles[i - 1])
            else:
                delete_shape(sp)

        for i in range(1, max([len(titles), *index_shapes]) + 1):
            sp = index_shapes.get(i)
            if sp is None:
                continue
            if i <= len(titles):
                set_shape_text(sp, str(i))
            else:
                delete_shape(sp)

    # --- part / chapter slides ----------------------------------------

    def _find_slides(self, token: str, section_count: Optional[int] = None) -> List[Any]:
        """Slides of the current deck containing ``token``.

        With ``section_count`` K, only slides holding exactly
        ``{section_title_1}``..``{section_title_K}`` match.
        """
        matches = []
        for slide in self.prs.slides:
            if not slide_contains(slide, token):
                continue
            if section_count is not None:
                text = slide_text(slide).casefold()
                wanted = all(_section_title_token(i) in text for i in range(1, section_count + 1))
                if not wanted or _section_title_token(section_count + 1) in text:
                    continue
            matches.append(slide)
        return matches

    def _generate_part_slides(self) -> None:
        parts = self.outline.parts
        if not parts:
            logger.info("Outline has no parts")
            return

        templates = self._find_slides(PART_SUBTITLE_TOKEN)
        if not templates:
            raise TemplateContractError(f"No template slide contains {PART_SUBTITLE_TOKEN!r}")
        logger.info("Found %d part template slides", len(templates))

        pool = TemplatePool(self.rng)
        for index, part in enumerate(parts, start=1):
            self._generate_part_slide(pool, templates, index, part)
            self._generate_chapter_slides(index, part)

    def _generate_part_slide(self, pool: TemplatePool, templates: List[Any], index: int, part: Part) -> None:
        logger.info("Part %d: %s", index, part.title)
        slide = clone_slide(self.prs, pool.next(templates))

        replacements = {PART_TITLE_TOKEN: part.title}
        if part.subtitle:
            replacements[PART_SUBTITLE_TOKEN] = part.subtitle

        replaced = substitute_slide(slide, replacements)
        if not part.subtitle:
            delete_shapes_containing(slide, PART_SUBTITLE_TOKEN)
        logger.debug("Part %d slide: replaced %d placeholders", index, replaced)

    def _generate_chapter_slides(self, part_index: int, part: Part) -> None:
        pool = TemplatePool(self.rng)
        for index, chapter in enumerate(part.chapters, start=1):
            templates = self._find_slides(CHAPTER_TITLE_TOKEN, chapter.section_count)
            if not templates:
                raise TemplateContractError(
                    f"No {CHAPTER_TITLE_TOKEN} template slide with exactly {chapter.section_count} sections "
                    f"(part {part_index}, chapter {index}: {chapter.title!r})"
                )

            logger.info("  Chapter %d.%d: %s (%d sections)", part_index, index, chapter.title, chapter.section_count)
            slide = clone_slide(self.prs, pool.next(templates))
            replaced = substitute_slide(slide, self._chapter_replacements(chapter))
            if not chapter.subtitle:
                delete_shapes_containing(slide, CHAPTER_SUBTITLE_TOKEN)
            logger.debug("  Chapter %d.%d slide: replaced %d placeholders", part_index, index, replaced)

    @staticmethod
    def _chapter_replacements(chapter: Chapter) -> Dict[str, str]:
        replacements = {CHAPTER_TITLE_TOKEN: chapter.title}
        if chapter.subtitle:
            replacements[CHAPTER_SUBTITLE_TOKEN] = chapter.subtitle

        for i, section in enumerate(chapter.sections, start=1):
            replacements[f"{{s{i}}}"] = str(i)
            if section.title is not None:
                replacements[_section_title_token(i)] = section.title
            if section.effective_subtitle is not None:
                replacements[f"{{section_subtitle_{i}}}"] = section.effective_subtitle
            for j, item in enumerate(section.items, start=1):
                if item.title is not None:
                    replacements[f"{{item_{i}_{j}}}"] = item.title
        return replacements

    # --- closing slide --------------------------------------------------

    def _generate_closing_slide(self, template_slide) -> None:
        slide = clone_slide(self.prs, template_slide)
        replaced = substitute_slide(slide, self.outline.closing_replacements())
        logger.info("Closing slide: replaced %d placeholders", replaced)
