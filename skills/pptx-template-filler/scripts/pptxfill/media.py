"""Media deduplication and unused-resource cleanup for a finished deck."""

from __future__ import annotations

import hashlib
import logging
from typing import Dict, Optional

from pptx.opc.constants import RELATIONSHIP_TYPE as RT

from .cloning import collect_relationship_ids, remap_relationship_ids

logger = logging.getLogger(__name__)

MEDIA_RELTYPES = frozenset({RT.IMAGE, RT.CHART, RT.PACKAGE, RT.OLE_OBJECT, RT.VML_DRAWING})
DATA_REFERENCE_RELTYPES = frozenset({RT.AUDIO, RT.VIDEO, RT.MEDIA})


def image_hash_key(part) -> Optional[str]:
    """``"<content-type>:<sha256>"`` for an image part, or None if unreadable."""
    try:
        digest = hashlib.sha256(part.blob).hexdigest()
    except Exception as exc:
        logger.warning("Failed to hash image %s: %s", getattr(part, "partname", part), exc)
        return None
    return f"{part.content_type}:{digest}"


def deduplicate_media(prs) -> int:
    """Point every slide at one canonical copy of byte-identical images.

    The first image seen (in slide order) for a given key becomes canonical.
    Returns the number of duplicate relationships collapsed.
    """
    canonical: Dict[str, object] = {}
    collapsed = 0

    for slide in prs.slides:
        slide_part = slide.part
        image_rels = [rel for rel in slide_part.rels.values() if rel.reltype == RT.IMAGE and not rel.is_external]
        for rel in image_rels:
            image_part = rel.target_part
            key = image_hash_key(image_part)
            if key is None:
                continue

            canonical_part = canonical.setdefault(key, image_part)
            if canonical_part is image_part:
                continue

            new_rId = slide_part.relate_to(canonical_part, RT.IMAGE)
            remap_relationship_ids(slide_part._element, {rel.rId: new_rId})
            slide_part.drop_rel(rel.rId)
            collapsed += 1
            logger.debug("Deduplicated image %s -> %s", image_part.partname, canonical_part.partname)

    if collapsed:
        logger.info("Deduplicated %d duplicate images", collapsed)
    else:
        logger.info("No duplicate images detected")
    return collapsed


def cleanup_slide_media(slide) -> int:
    """Drop media relationships of one slide that its markup no longer references."""
    slide_part = slide.part
    referenced = collect_relationship_ids(slide_part._element)
    removed = 0

    for rId, rel in list(slide_part.rels.items()):
        if rel.reltype not in MEDIA_RELTYPES and rel.reltype not in DATA_REFERENCE_RELTYPES:
            continue
        if rId in referenced:
            continue
        try:
            slide_part.drop_rel(rId)
            removed += 1
            logger.debug("Removed unused %s relationship %s from %s", rel.reltype.rsplit("/", 1)[-1], rId, slide_part.partname)
        except Exception as exc:
            logger.warning("Failed to remove %s from %s: %s", rId, slide_part.partname, exc)

    return removed


def cleanup_unused_media(prs) -> int:
    """Run :func:`cleanup_slide_media` over every slide; returns total removed."""
    removed = sum(cleanup_slide_media(slide) for slide in prs.slides)
    logger.info("Removed %d unused media resources", removed)
    return removed
