"""Read-only outline model (document -> parts -> chapters -> sections -> items)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .validation import validate_outline


def _opt_str(node: Dict[str, Any], key: str) -> Optional[str]:
    value = node.get(key)
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class Item:
    title: Optional[str] = None


@dataclass(frozen=True)
class Section:
    title: Optional[str] = None
    subtitle: Optional[str] = None
    items: List[Item] = field(default_factory=list)

    @property
    def effective_subtitle(self) -> Optional[str]:
        """Section subtitle, falling back to the first item's title."""
        if self.subtitle is not None:
            return self.subtitle
        if self.items and self.items[0].title is not None:
            return self.items[0].title
        return None


@dataclass(frozen=True)
class Chapter:
    title: str
    subtitle: Optional[str] = None
    sections: List[Section] = field(default_factory=list)

    @property
    def section_count(self) -> int:
        return len(self.sections)


@dataclass(frozen=True)
class Part:
    title: str
    subtitle: Optional[str] = None
    chapters: List[Chapter] = field(default_factory=list)


@dataclass(frozen=True)
class Outline:
    title: Optional[str] = None
    subtitle: Optional[str] = None
    author: Optional[str] = None
    website: Optional[str] = None
    endtitle: Optional[str] = None
    parts: List[Part] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Outline":
        validate_outline(data)
        parts = []
        for part in data.get("parts") or []:
            chapters = []
            for chapter in part.get("chapters") or []:
                sections = [
                    Section(
                        title=_opt_str(section, "title"),
                        subtitle=_opt_str(section, "subtitle"),
                        items=[Item(title=_opt_str(item, "title")) for item in section.get("items") or []],
                    )
                    for section in chapter.get("sections") or []
                ]
                chapters.append(
                    Chapter(title=chapter["title"], subtitle=_opt_str(chapter, "subtitle"), sections=sections)
                )
            parts.append(Part(title=part["title"], subtitle=_opt_str(part, "subtitle"), chapters=chapters))

        return cls(
            title=_opt_str(data, "title"),
            subtitle=_opt_str(data, "subtitle"),
            author=_opt_str(data, "author"),
            website=_opt_str(data, "website"),
            endtitle=_opt_str(data, "endtitle"),
            parts=parts,
        )

    @property
    def part_titles(self) -> List[str]:
        return [part.title for part in self.parts]

    def title_replacements(self) -> Dict[str, str]:
        """Title-slide values; absent fields become empty strings."""
        return {
            "{ppt_title}": self.title or "",
            "{ppt_subtitle}": self.subtitle or "",
            "{ppt_author}": self.author or "",
            "{ppt_website}": self.website or "",
        }

    def closing_replacements(self) -> Dict[str, str]:
        """Closing-slide values; only fields present in the outline are substituted."""
        candidates = (("{end_title}", self.endtitle), ("{ppt_author}", self.author), ("{ppt_website}", self.website))
        return {token: value for token, value in candidates if value is not None}
