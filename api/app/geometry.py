"""Page-space geometry for placed fields.

UI coordinates are fractions of the page with a top-left origin and y
growing downward. Page space is the PDF user space: points, bottom-left
origin, y growing upward. Nothing here clamps; a field that hangs off the
page produces a rectangle that does too.
"""
from dataclasses import dataclass

from .errors import GeometryError


@dataclass(frozen=True)
class Rectangle:
    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class PageGeometry:
    width_pt: float
    height_pt: float


def field_to_page_rect(field, page: PageGeometry) -> Rectangle:
    """Convert a field's normalized box into a page-space rectangle."""
    width = field.w_pct * page.width_pt
    height = field.h_pct * page.height_pt
    x = field.x_pct * page.width_pt
    # yPct is measured from the top; the PDF rectangle is anchored at its bottom edge
    top = page.height_pt - field.y_pct * page.height_pt
    return Rectangle(x=x, y=top - height, width=width, height=height)


def fit_inside_box(asset_width: float, asset_height: float, box: Rectangle) -> Rectangle:
    """Largest rectangle with the asset's aspect ratio that fits in ``box``, centered.

    Raises GeometryError when either the asset or the box has no area, since
    the aspect ratio is undefined.
    """
    if asset_width <= 0 or asset_height <= 0:
        raise GeometryError(f"asset has no area ({asset_width}x{asset_height})")
    if box.width <= 0 or box.height <= 0:
        raise GeometryError(f"target box has no area ({box.width}x{box.height})")

    asset_aspect = asset_width / asset_height
    box_aspect = box.width / box.height

    if asset_aspect > box_aspect:
        draw_width = box.width
        draw_height = box.width / asset_aspect
    else:
        draw_height = box.height
        draw_width = box.height * asset_aspect

    return Rectangle(
        x=box.x + (box.width - draw_width) / 2,
        y=box.y + (box.height - draw_height) / 2,
        width=draw_width,
        height=draw_height,
    )
