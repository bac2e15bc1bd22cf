from __future__ import annotations

import sys
from pathlib import Path

import pytest

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from pptxfill import Outline, OutlineValidationError, load_outline_file, parse_outline_text, validate_outline  # noqa: E402


def test_validate_outline_accepts_full_outline() -> None:
    outline = {
        "title": "Deck",
        "subtitle": "Sub",
        "author": "Ada",
        "website": "example.com",
        "endtitle": "Thanks",
        "parts": [
            {
                "title": "Part A",
                "subtitle": "About A",
                "chapters": [
                    {
                        "title": "Chapter 1",
                        "sections": [{"title": "S1", "items": [{"title": "I1"}, {"title": "I2"}]}],
                    }
                ],
            }
        ],
    }
    assert validate_outline(outline) is outline


def test_validate_outline_rejects_non_object_root() -> None:
    with pytest.raises(OutlineValidationError) as exc:
        validate_outline(["not", "an", "object"])
    assert "Root JSON value must be an object" in str(exc.value)


def test_validate_outline_requires_part_and_chapter_titles() -> None:
    bad = {"parts": [{"subtitle": "x", "chapters": [{"subtitle": "y"}]}]}
    with pytest.raises(OutlineValidationError) as exc:
        validate_outline(bad)
    message = str(exc.value)
    assert "parts[0].title is required" in message
    assert "parts[0].chapters[0].title is required" in message
    assert len(exc.value.issues) == 2
    assert message.startswith("Outline validation failed (2 issues):")
    assert exc.value.paths == ["parts[0].title", "parts[0].chapters[0].title"]


def test_validate_outline_rejects_wrong_types() -> None:
    bad = {"title": 5, "parts": {"title": "oops"}}
    with pytest.raises(OutlineValidationError) as exc:
        validate_outline(bad)
    assert "root.title must be a string when provided" in str(exc.value)
    assert "root.parts must be a list when provided" in str(exc.value)


def test_null_optional_fields_are_treated_as_absent() -> None:
    outline = Outline.from_dict({"title": None, "parts": [{"title": "A", "subtitle": None, "chapters": None}]})
    assert outline.title is None
    assert outline.parts[0].subtitle is None
    assert outline.parts[0].chapters == []


def test_parse_outline_text_reports_json_position() -> None:
    with pytest.raises(OutlineValidationError) as exc:
        parse_outline_text('{"title": "x",}')
    assert "Invalid JSON at line 1" in str(exc.value)


def test_load_outline_file_missing(tmp_path: Path) -> None:
    with pytest.raises(OutlineValidationError) as exc:
        load_outline_file(tmp_path / "missing.json")
    assert "Outline file not found" in str(exc.value)


def test_load_outline_file_rejects_non_utf8(tmp_path: Path) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"title": "caf\xe9"}')
    with pytest.raises(OutlineValidationError) as exc:
        load_outline_file(path)
    assert "not valid UTF-8" in str(exc.value)


def test_load_outline_file_rejects_directory(tmp_path: Path) -> None:
    with pytest.raises(OutlineValidationError) as exc:
        load_outline_file(tmp_path)
    assert "Cannot read outline file" in str(exc.value)
    assert exc.value.paths == []


def test_section_subtitle_falls_back_to_first_item() -> None:
    outline = Outline.from_dict(
        {
            "parts": [
                {
                    "title": "A",
                    "chapters": [
                        {
                            "title": "C",
                            "sections": [
                                {"title": "S1", "items": [{"title": "first"}, {"title": "second"}]},
                                {"title": "S2", "subtitle": "own", "items": [{"title": "ignored"}]},
                                {"title": "S3"},
                            ],
                        }
                    ],
                }
            ]
        }
    )
    sections = outline.parts[0].chapters[0].sections
    assert outline.parts[0].chapters[0].section_count == 3
    assert [s.effective_subtitle for s in sections] == ["first", "own", None]


def test_front_and_closing_replacements() -> None:
    outline = Outline.from_dict({"title": "T", "author": "Ada"})
    assert outline.title_replacements() == {
        "{ppt_title}": "T",
        "{ppt_subtitle}": "",
        "{ppt_author}": "Ada",
        "{ppt_website}": "",
    }
    assert outline.closing_replacements() == {"{ppt_author}": "Ada"}
