"""Stamp one raster signature into every signature field of a PDF.

The run is all-or-nothing at the request level (bad asset, load or
serialize failure) and forgiving at the field level: a field pointing at a
missing page or with a degenerate box is skipped with a warning while the
rest are still drawn.
"""
import logging
from dataclasses import dataclass, field as dc_field
from typing import List, Sequence

from .config import RENDERED_FIELD_TYPES
from .errors import CompositingFailed, GeometryError, PageOutOfRange, UnsupportedAssetFormat
from .fields import select_renderable_fields
from .geometry import Rectangle, field_to_page_rect, fit_inside_box
from .pdf_engine import DECODE_ATTEMPTS, PdfDocument
from .schemas import PdfField

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    field_id: str
    page_index: int
    box: Rectangle
    drawn: Rectangle


@dataclass(frozen=True)
class SkippedField:
    field_id: str
    reason: str
    detail: str


@dataclass
class CompositingResult:
    pdf_bytes: bytes
    placements: List[Placement] = dc_field(default_factory=list)
    skipped: List[SkippedField] = dc_field(default_factory=list)


def composite_fields(
    original_pdf: bytes,
    fields: Sequence[PdfField],
    asset_bytes: bytes,
    kinds=RENDERED_FIELD_TYPES,
) -> CompositingResult:
    doc = PdfDocument.load(original_pdf)

    asset = doc.embed_image(asset_bytes)
    if not asset.recognized:
        raise UnsupportedAssetFormat([f.value for f in DECODE_ATTEMPTS])

    targets = select_renderable_fields(fields, kinds)
    placements: List[Placement] = []
    skipped: List[SkippedField] = []

    for f in targets:
        try:
            if not 0 <= f.page_index < doc.page_count:
                raise PageOutOfRange(f.id, f.page_index, doc.page_count)
            box = field_to_page_rect(f, doc.page_geometry(f.page_index))
            drawn = fit_inside_box(asset.width, asset.height, box)
        except (PageOutOfRange, GeometryError) as exc:
            if isinstance(exc, GeometryError):
                exc.field_id = f.id
            logger.warning("skipping field %s: %s", exc.field_id, exc.message)
            skipped.append(SkippedField(field_id=exc.field_id, reason=exc.code, detail=exc.message))
            continue
        doc.draw_image(f.page_index, asset, drawn)
        placements.append(Placement(field_id=f.id, page_index=f.page_index, box=box, drawn=drawn))

    if targets and not placements:
        ids = ", ".join(s.field_id for s in skipped)
        raise CompositingFailed(f"no signature fields could be placed (skipped: {ids})")

    return CompositingResult(pdf_bytes=doc.save(), placements=placements, skipped=skipped)
