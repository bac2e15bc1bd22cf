"""Outline validation for the deck generator JSON input."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from .errors import OutlineIssue, OutlineValidationError

_DOCUMENT_FIELDS = ("title", "subtitle", "author", "website", "endtitle")


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check_optional_str(node: Dict[str, Any], field: str, prefix: str, issues: list[OutlineIssue]) -> None:
    value = node.get(field)
    if value is not None and not isinstance(value, str):
        issues.append(OutlineIssue(f"{prefix}.{field}", "must be a string when provided"))


def _check_required_title(node: Dict[str, Any], prefix: str, issues: list[OutlineIssue]) -> None:
    if not _is_non_empty_str(node.get("title")):
        issues.append(OutlineIssue(f"{prefix}.title", "is required and must be a non-empty string"))


def _check_optional_list(node: Dict[str, Any], field: str, prefix: str, issues: list[OutlineIssue]) -> list:
    value = node.get(field)
    if value is None:
        return []
    if not isinstance(value, list):
        issues.append(OutlineIssue(f"{prefix}.{field}", "must be a list when provided"))
        return []
    return value


def _check_section(section: Any, prefix: str, issues: list[OutlineIssue]) -> None:
    if not isinstance(section, dict):
        issues.append(OutlineIssue(prefix, "must be an object"))
        return
    _check_optional_str(section, "title", prefix, issues)
    _check_optional_str(section, "subtitle", prefix, issues)
    for idx, item in enumerate(_check_optional_list(section, "items", prefix, issues)):
        ip = f"{prefix}.items[{idx}]"
        if not isinstance(item, dict):
            issues.append(OutlineIssue(ip, "must be an object with a title"))
            continue
        _check_optional_str(item, "title", ip, issues)


def _check_chapter(chapter: Any, prefix: str, issues: list[OutlineIssue]) -> None:
    if not isinstance(chapter, dict):
        issues.append(OutlineIssue(prefix, "must be an object"))
        return
    _check_required_title(chapter, prefix, issues)
    _check_optional_str(chapter, "subtitle", prefix, issues)
    for idx, section in enumerate(_check_optional_list(chapter, "sections", prefix, issues)):
        _check_section(section, f"{prefix}.sections[{idx}]", issues)


def _check_part(part: Any, prefix: str, issues: list[OutlineIssue]) -> None:
    if not isinstance(part, dict):
        issues.append(OutlineIssue(prefix, "must be an object"))
        return
    _check_required_title(part, prefix, issues)
    _check_optional_str(part, "subtitle", prefix, issues)
    for idx, chapter in enumerate(_check_optional_list(part, "chapters", prefix, issues)):
        _check_chapter(chapter, f"{prefix}.chapters[{idx}]", issues)


def validate_outline(outline: Any) -> Dict[str, Any]:
    """Validate an outline dict, collecting every issue before raising."""
    if not isinstance(outline, dict):
        raise OutlineValidationError([OutlineIssue("", "Root JSON value must be an object")])

    issues: list[OutlineIssue] = []
    for field in _DOCUMENT_FIELDS:
        _check_optional_str(outline, field, "root", issues)

    for idx, part in enumerate(_check_optional_list(outline, "parts", "root", issues)):
        _check_part(part, f"parts[{idx}]", issues)

    if issues:
        raise OutlineValidationError(issues)

    return outline


def parse_outline_text(raw: str) -> Dict[str, Any]:
    """Parse and validate outline JSON text."""
    try:
        data: Dict[str, Any] = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise OutlineValidationError(
            [OutlineIssue("", f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}")]
        ) from exc

    return validate_outline(data)


def load_outline_file(outline_path: Path) -> Dict[str, Any]:
    """Load and validate a JSON outline file."""
    try:
        raw = Path(outline_path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise OutlineValidationError([OutlineIssue("", f"Outline file not found: {outline_path}")]) from exc
    except UnicodeDecodeError as exc:
        raise OutlineValidationError(
            [OutlineIssue("", f"Outline file is not valid UTF-8: {outline_path} (byte {exc.start})")]
        ) from exc
    except OSError as exc:
        raise OutlineValidationError(
            [OutlineIssue("", f"Cannot read outline file {outline_path}: {exc.strerror or exc}")]
        ) from exc

    return parse_outline_text(raw)
