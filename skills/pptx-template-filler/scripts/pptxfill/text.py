"""Placeholder substitution on slide shapes.

Placeholders are literal ``{token}`` markers typed into template text boxes.
A shape whose text contains a token is overwritten wholesale with the mapped
value, keeping the formatting of its first paragraph and first run.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Iterator, Mapping

from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement

logger = logging.getLogger(__name__)


def _sp(shape: Any):
    # Accept python-pptx shape proxies as well as raw p:sp elements.
    return getattr(shape, "_element", shape)


def _tx_body(shape: Any):
    return _sp(shape).find(qn("p:txBody"))


def _contains(text: str, token: str) -> bool:
    return token.casefold() in text.casefold()


def iter_text_shapes(slide: Any) -> Iterator[Any]:
    """Yield every ``p:sp`` element of a slide, group members included."""
    root = getattr(slide, "_element", slide)
    yield from list(root.iter(qn("p:sp")))


def shape_text(shape: Any) -> str:
    """Return the run text of a shape, one line per paragraph, right-trimmed."""
    tx_body = _tx_body(shape)
    if tx_body is None:
        return ""

    lines = []
    for paragraph in tx_body.findall(qn("a:p")):
        chunks = []
        for run in paragraph.findall(qn("a:r")):
            t = run.find(qn("a:t"))
            if t is not None and t.text:
                chunks.append(t.text)
        lines.append("".join(chunks))
    return "\n".join(lines).rstrip()


def set_shape_text(shape: Any, text: str) -> None:
    """Overwrite the whole text of a shape, keeping first-paragraph formatting."""
    tx_body = _tx_body(shape)
    if tx_body is None:
        return

    paragraphs = tx_body.findall(qn("a:p"))
    if not paragraphs:
        first = OxmlElement("a:p")
        tx_body.append(first)
        paragraphs = [first]

    first = paragraphs[0]
    p_pr = first.find(qn("a:pPr"))
    first_run = first.find(qn("a:r"))
    r_pr = first_run.find(qn("a:rPr")) if first_run is not None else None
    end_para_r_pr = first.find(qn("a:endParaRPr"))

    p_pr = deepcopy(p_pr) if p_pr is not None else None
    r_pr = deepcopy(r_pr) if r_pr is not None else None
    end_para_r_pr = deepcopy(end_para_r_pr) if end_para_r_pr is not None else None

    for child in list(first):
        first.remove(child)

    if p_pr is not None:
        first.append(p_pr)

    run = OxmlElement("a:r")
    if r_pr is not None:
        run.append(r_pr)
    t = OxmlElement("a:t")
    t.text = text or ""
    run.append(t)
    first.append(run)

    if end_para_r_pr is not None:
        first.append(end_para_r_pr)

    for extra in paragraphs[1:]:
        tx_body.remove(extra)


def substitute(shape: Any, replacements: Mapping[str, str]) -> int:
    """Replace the shape text with the value of the first matching token.

    Keys are tried in the caller's order and matched as case-insensitive
    substrings of the full shape text. At most one substitution happens per
    shape. Returns the number of substitutions (0 or 1).
    """
    if _tx_body(shape) is None:
        return 0

    full_text = shape_text(shape)
    for token, value in replacements.items():
        if _contains(full_text, token):
            logger.debug("Replacing %r (text %r) with %r", token, full_text, value)
            set_shape_text(shape, value)
            return 1
    return 0


def delete_shape(shape: Any) -> None:
    sp = _sp(shape)
    parent = sp.getparent()
    if parent is not None:
        parent.remove(sp)


def substitute_slide(slide: Any, replacements: Mapping[str, str]) -> int:
    """Run :func:`substitute` over every text shape of a slide."""
    if not replacements:
        return 0
    return sum(substitute(sp, replacements) for sp in iter_text_shapes(slide))


def delete_shapes_containing(slide: Any, token: str) -> int:
    """Delete every shape whose text contains ``token``; returns how many."""
    doomed = [sp for sp in iter_text_shapes(slide) if _contains(shape_text(sp), token)]
    for sp in doomed:
        logger.debug("Deleting shape containing %r", token)
        delete_shape(sp)
    return len(doomed)


def slide_text(slide: Any) -> str:
    return " ".join(shape_text(sp) for sp in iter_text_shapes(slide))


def slide_contains(slide: Any, token: str) -> bool:
    return any(_contains(shape_text(sp), token) for sp in iter_text_shapes(slide))
