from typing import Iterable, List

from .config import RENDERED_FIELD_TYPES
from .schemas import PdfField


def is_image_bearing(field: PdfField, kinds=RENDERED_FIELD_TYPES) -> bool:
    return field.type.value in kinds


def select_renderable_fields(fields: Iterable[PdfField], kinds=RENDERED_FIELD_TYPES) -> List[PdfField]:
    """Fields the compositing engine draws, in submission order."""
    return [f for f in fields if is_image_bearing(f, kinds)]
