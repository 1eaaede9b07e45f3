"""pypdf/reportlab backed document engine.

A ``PdfDocument`` wraps one loaded PDF for the lifetime of a single
compositing run: load, ask for page sizes, queue image draws, save. Draws are
rendered as one reportlab overlay per touched page and merged on ``save()``.
Instances are not thread-safe and must not be reused after ``save()`` or a
failure.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import Dict, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError
from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .errors import CompositingFailed
from .geometry import PageGeometry, Rectangle

logger = logging.getLogger(__name__)


class AssetFormat(str, Enum):
    PNG = "PNG"
    JPEG = "JPEG"
    UNRECOGNIZED = "UNRECOGNIZED"


# order matters: PNG is attempted first, JPEG second
DECODE_ATTEMPTS = (AssetFormat.PNG, AssetFormat.JPEG)


@dataclass(frozen=True)
class DecodedAsset:
    format: AssetFormat
    width: int = 0
    height: int = 0
    data: bytes = b""

    @property
    def recognized(self) -> bool:
        return self.format is not AssetFormat.UNRECOGNIZED


def _probe(data: bytes, fmt: AssetFormat) -> Optional[Tuple[int, int]]:
    try:
        with Image.open(BytesIO(data), formats=[fmt.value]) as img:
            img.load()
            return img.size
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        logger.info("asset is not %s: %s", fmt.value, exc)
        return None


def decode_asset(data: bytes) -> DecodedAsset:
    for fmt in DECODE_ATTEMPTS:
        size = _probe(data, fmt)
        if size is not None:
            width, height = size
            return DecodedAsset(format=fmt, width=width, height=height, data=data)
    return DecodedAsset(format=AssetFormat.UNRECOGNIZED)


def _overlay_page(width, height, draw_ops):
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=(width, height))
    readers = {}
    for asset, rect in draw_ops:
        img = readers.get(id(asset))
        if img is None:
            img = readers[id(asset)] = ImageReader(BytesIO(asset.data))
        c.drawImage(img, rect.x, rect.y, width=rect.width, height=rect.height, mask='auto')
    c.showPage(); c.save()
    return buf.getvalue()


class PdfDocument:
    def __init__(self, reader: PdfReader):
        self._reader = reader
        self._writer = PdfWriter()
        for p in reader.pages:
            self._writer.add_page(p)
        self._draw_map: Dict[int, List[Tuple[DecodedAsset, Rectangle]]] = {}
        self._saved = False

    @classmethod
    def load(cls, data: bytes) -> "PdfDocument":
        try:
            return cls(PdfReader(BytesIO(data)))
        except (PyPdfError, ValueError, KeyError) as exc:
            raise CompositingFailed(f"could not load PDF: {exc}") from exc

    @property
    def page_count(self) -> int:
        return len(self._writer.pages)

    def page_geometry(self, page_index: int) -> PageGeometry:
        page = self._writer.pages[page_index]
        return PageGeometry(width_pt=float(page.mediabox.width), height_pt=float(page.mediabox.height))

    def embed_image(self, data: bytes) -> DecodedAsset:
        return decode_asset(data)

    def draw_image(self, page_index: int, asset: DecodedAsset, rect: Rectangle) -> None:
        if self._saved:
            raise CompositingFailed("document already serialized")
        if not asset.recognized:
            raise CompositingFailed("cannot draw an unrecognized asset")
        if not 0 <= page_index < self.page_count:
            raise CompositingFailed(f"page {page_index} does not exist")
        self._draw_map.setdefault(page_index, []).append((asset, rect))

    def save(self) -> bytes:
        if self._saved:
            raise CompositingFailed("document already serialized")
        self._saved = True
        try:
            for pidx, ops in self._draw_map.items():
                geom = self.page_geometry(pidx)
                overlay_pdf = _overlay_page(geom.width_pt, geom.height_pt, ops)
                overlay_reader = PdfReader(BytesIO(overlay_pdf))
                self._writer.pages[pidx].merge_page(overlay_reader.pages[0])
            out = BytesIO(); self._writer.write(out)
        except Exception as exc:
            logger.exception("failed to render signed PDF")
            raise CompositingFailed(f"could not render signed PDF: {exc}") from exc
        return out.getvalue()
