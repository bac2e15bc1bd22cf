"""Slide cloning and deletion on top of python-pptx's package layer.

python-pptx has no public API to duplicate or delete slides, so this module
works with slide parts and relationships directly: the slide XML is deep
copied, owned media parts are copied into the new slide, and every
``r:*`` attribute in the copy is remapped to the new relationship ids.
"""

from __future__ import annotations

import logging
import re
from copy import deepcopy
from typing import Any, Dict, Mapping, Set

from lxml import etree
from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pptx.opc.packuri import PackURI
from pptx.opc.package import Part, XmlPart
from pptx.parts.slide import SlidePart

from .errors import DeckGenerationError

logger = logging.getLogger(__name__)

R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
_R_PREFIX = "{%s}" % R_NS

MIN_SLIDE_ID = 256

# Relationship targets owned by a single slide; copied on clone.
OWNED_RELTYPES = frozenset(
    {
        RT.IMAGE,
        RT.CHART,
        RT.PACKAGE,
        RT.OLE_OBJECT,
        RT.AUDIO,
        RT.VIDEO,
        RT.MEDIA,
        RT.VML_DRAWING,
    }
)


def remap_relationship_ids(element: Any, mapping: Mapping[str, str]) -> int:
    """Rewrite relationship-namespace attributes through ``mapping`` in one pass."""
    if not mapping:
        return 0
    count = 0
    for node in element.iter(etree.Element):
        for name, value in node.attrib.items():
            if name.startswith(_R_PREFIX) and value in mapping:
                node.set(name, mapping[value])
                count += 1
    return count


def collect_relationship_ids(element: Any) -> Set[str]:
    """Every non-empty relationship-namespace attribute value under ``element``."""
    referenced: Set[str] = set()
    for node in element.iter(etree.Element):
        for name, value in node.attrib.items():
            if name.startswith(_R_PREFIX) and value:
                referenced.add(value)
    return referenced


def next_slide_id(prs) -> int:
    """``max(existing slide ids, 256) + 1``."""
    sld_id_lst = prs.slides._sldIdLst  # type: ignore[attr-defined]
    ids = [int(sld_id.get("id")) for sld_id in sld_id_lst.sldId_lst]
    return max(ids + [MIN_SLIDE_ID]) + 1


def _partname_template(partname: PackURI) -> str:
    stem = partname.filename[: -(len(partname.ext) + 1)] if partname.ext else partname.filename
    prefix = re.sub(r"\d+$", "", stem)
    suffix = f".{partname.ext}" if partname.ext else ""
    return f"{partname.baseURI.rstrip('/')}/{prefix}%d{suffix}"


def _copy_part(package, source: Part) -> Part:
    partname = package.next_partname(_partname_template(source.partname))
    return type(source).load(partname, source.content_type, package, source.blob)


def _copy_relationships(package, source: Part, target: Part) -> Dict[str, str]:
    """Relate ``target`` to copies of ``source``'s owned parts; return old->new rIds."""
    mapping: Dict[str, str] = {}
    for rId, rel in source.rels.items():
        if rel.is_external:
            mapping[rId] = target.relate_to(rel.target_ref, rel.reltype, is_external=True)
            continue
        if rel.reltype == RT.NOTES_SLIDE:
            continue
        if rel.reltype in OWNED_RELTYPES or source.partname.startswith("/ppt/charts/"):
            child = _copy_part(package, rel.target_part)
            mapping[rId] = target.relate_to(child, rel.reltype)
            child_mapping = _copy_relationships(package, rel.target_part, child)
            if isinstance(child, XmlPart):
                remap_relationship_ids(child._element, child_mapping)
        else:
            # Layouts, hyperlinked slides, tags: shared with the source.
            mapping[rId] = target.relate_to(rel.target_part, rel.reltype)
    return mapping


def clone_slide(prs, source_slide):
    """Append a deep copy of ``source_slide`` to the end of the deck."""
    source_part = source_slide.part
    package = prs.part.package
    try:
        partname = package.next_partname("/ppt/slides/slide%d.xml")
        new_part = SlidePart(partname, source_part.content_type, package, deepcopy(source_part._element))
        rId = prs.part.relate_to(new_part, RT.SLIDE)

        mapping = _copy_relationships(package, source_part, new_part)
        remap_relationship_ids(new_part._element, {old: new for old, new in mapping.items() if old != new})

        slide_id = next_slide_id(prs)
        prs.slides._sldIdLst._add_sldId(id=slide_id, rId=rId)  # type: ignore[attr-defined]
    except Exception as exc:
        raise DeckGenerationError(f"Failed to clone slide {source_part.partname}: {exc}") from exc

    logger.debug("Cloned %s -> %s (id=%s)", source_part.partname, partname, slide_id)
    return new_part.slide


def delete_slide(prs, slide) -> None:
    """Remove a slide from the slide list and drop its part from the package."""
    sld_id_lst = prs.slides._sldIdLst  # type: ignore[attr-defined]
    for sld_id in list(sld_id_lst.sldId_lst):
        if prs.part.related_part(sld_id.rId) is slide.part:
            rel_id = sld_id.rId
            prs.part.drop_rel(rel_id)
            sld_id_lst.remove(sld_id)
            return
    raise ValueError(f"Slide {slide.part.partname} is not part of this presentation")


def delete_slide_range(prs, start: int, end: int) -> int:
    """Delete slides at positions ``start..end`` inclusive, back to front.

    Failures are logged and skipped; returns the number of slides deleted.
    """
    sld_id_lst = prs.slides._sldIdLst  # type: ignore[attr-defined]
    entries = list(sld_id_lst.sldId_lst)
    if start < 0 or start >= len(entries) or end < start:
        logger.info("No slides to delete in range %d..%d", start, end)
        return 0

    end = min(end, len(entries) - 1)
    deleted = 0
    for index in range(end, start - 1, -1):
        sld_id = entries[index]
        rel_id = sld_id.rId
        try:
            # Drop the relationship first so a failure leaves the slide listed and intact.
            prs.part.drop_rel(rel_id)
            sld_id_lst.remove(sld_id)
            deleted += 1
            logger.debug("Deleted slide at position %d (%s)", index, rel_id)
        except Exception as exc:
            logger.warning("Failed to delete slide at position %d (%s): %s", index, rel_id, exc)

    logger.info("Deleted %d template slides (%d..%d)", deleted, start, end)
    return deleted
