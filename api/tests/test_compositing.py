from io import BytesIO

import pytest
from PIL import Image
from pypdf import PdfReader

from app.compositing import composite_fields
from app.errors import CompositingFailed, UnsupportedAssetFormat
from app.pdf_engine import AssetFormat, PdfDocument, decode_asset
from app.schemas import FieldType, PdfField
from conftest import A4, make_field, make_image, make_pdf


def _has_image(page) -> bool:
    resources = page.get("/Resources")
    return bool(resources) and "/XObject" in resources.get_object()


def test_decode_asset_prefers_png_then_jpeg():
    png = decode_asset(make_image(30, 10, "PNG"))
    jpg = decode_asset(make_image(40, 20, "JPEG"))
    assert (png.format, png.width, png.height) == (AssetFormat.PNG, 30, 10)
    assert (jpg.format, jpg.width, jpg.height) == (AssetFormat.JPEG, 40, 20)


def test_decode_asset_tags_unknown_bytes():
    assert decode_asset(b"definitely not an image").format is AssetFormat.UNRECOGNIZED
    gif = BytesIO()
    Image.new("RGB", (4, 4)).save(gif, format="GIF")
    assert not decode_asset(gif.getvalue()).recognized


def test_a4_signature_is_fit_to_width_and_centered():
    result = composite_fields(make_pdf(A4), [make_field()], make_image(300, 100))
    assert result.skipped == []
    (placement,) = result.placements
    box, drawn = placement.box, placement.drawn
    assert box.width == pytest.approx(178.584)
    assert box.height == pytest.approx(67.3512)
    assert box.x == pytest.approx(59.528)
    assert box.top == pytest.approx(841.89 - 0.8 * 841.89)
    assert drawn.width == pytest.approx(178.584)
    assert drawn.height == pytest.approx(59.528)
    assert drawn.x == pytest.approx(box.x)
    assert drawn.y == pytest.approx(box.y + (box.height - drawn.height) / 2)

    reader = PdfReader(BytesIO(result.pdf_bytes))
    assert len(reader.pages) == 1
    assert _has_image(reader.pages[0])


def test_out_of_range_page_is_skipped_and_others_render():
    fields = [make_field("bad", page_index=5), make_field("good", page_index=0)]
    result = composite_fields(make_pdf(A4), fields, make_image())
    assert [p.field_id for p in result.placements] == ["good"]
    assert [(s.field_id, s.reason) for s in result.skipped] == [("bad", "page_out_of_range")]


def test_fields_are_drawn_on_their_own_pages():
    fields = [make_field("p2", page_index=1), make_field("p1", page_index=0, y=0.1)]
    result = composite_fields(make_pdf(A4, (612, 792)), fields, make_image())
    assert [p.page_index for p in result.placements] == [1, 0]
    # letter page geometry is used for the second page
    assert result.placements[0].box.width == pytest.approx(0.3 * 612)
    reader = PdfReader(BytesIO(result.pdf_bytes))
    assert all(_has_image(p) for p in reader.pages)


def test_jpeg_asset_is_accepted():
    result = composite_fields(make_pdf(A4), [make_field()], make_image(200, 200, "JPEG"))
    assert len(result.placements) == 1


def test_unsupported_asset_fails_before_drawing():
    with pytest.raises(UnsupportedAssetFormat) as exc_info:
        composite_fields(make_pdf(A4), [make_field()], b"GIF89a-nope")
    assert exc_info.value.tried == ["PNG", "JPEG"]


def test_non_signature_fields_are_not_drawn():
    original = make_pdf(A4)
    result = composite_fields(original, [make_field("t", type="text")], make_image())
    assert result.placements == []
    assert result.skipped == []
    assert not _has_image(PdfReader(BytesIO(result.pdf_bytes)).pages[0])


def test_all_fields_skipped_is_a_failure():
    with pytest.raises(CompositingFailed) as exc_info:
        composite_fields(make_pdf(A4), [make_field("orphan", page_index=3)], make_image())
    assert "orphan" in exc_info.value.message


def test_invalid_pdf_bytes_fail_to_load():
    with pytest.raises(CompositingFailed):
        composite_fields(b"not a pdf at all", [make_field()], make_image())


def test_document_cannot_be_saved_twice():
    doc = PdfDocument.load(make_pdf(A4))
    doc.save()
    with pytest.raises(CompositingFailed):
        doc.save()


def test_input_fields_are_not_mutated():
    fields = [make_field("a"), make_field("b", page_index=9)]
    snapshot = [f.model_dump() for f in fields]
    composite_fields(make_pdf(A4), fields, make_image())
    assert [f.model_dump() for f in fields] == snapshot


def test_zero_height_field_is_skipped_as_geometry_error():
    flat = PdfField.model_construct(
        id="flat", pdf_id="doc", page_index=0, type=FieldType.signature,
        x_pct=0.1, y_pct=0.1, w_pct=0.3, h_pct=0.0,
    )
    result = composite_fields(make_pdf(A4), [flat, make_field("ok")], make_image())
    assert [p.field_id for p in result.placements] == ["ok"]
    assert [(s.field_id, s.reason) for s in result.skipped] == [("flat", "geometry_error")]


def test_negative_page_index_is_skipped():
    fields = [make_field("neg", page_index=-1), make_field("ok")]
    result = composite_fields(make_pdf(A4), fields, make_image())
    assert [p.field_id for p in result.placements] == ["ok"]
    assert [(s.field_id, s.reason) for s in result.skipped] == [("neg", "page_out_of_range")]


def _cm_operands(page):
    ops = page.get_contents().operations
    return [[float(v) for v in operands] for operands, op in ops if op == b"cm"]


def test_a4_signature_lands_at_fitted_rectangle():
    result = composite_fields(make_pdf(A4), [make_field()], make_image(300, 100))
    drawn = result.placements[0].drawn
    cms = _cm_operands(PdfReader(BytesIO(result.pdf_bytes)).pages[0])
    # reportlab draws an image as translate(x, y) then scale(width, height)
    translate = [1, 0, 0, 1, drawn.x, drawn.y]
    scale = [drawn.width, drawn.height]
    assert any(c == pytest.approx(translate, abs=1e-3) for c in cms)
    assert any(c[0] == pytest.approx(scale[0], abs=1e-3) and c[3] == pytest.approx(scale[1], abs=1e-3) for c in cms)
    assert drawn.x == pytest.approx(59.528)
    assert drawn.y == pytest.approx(104.9384)
    assert scale == pytest.approx([178.584, 59.528])
