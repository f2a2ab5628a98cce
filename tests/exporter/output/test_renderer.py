"""
Unit tests for the ReportLab encoder.

Uses pypdf to inspect generated PDFs.
"""

import pytest
from PIL import Image
from pypdf import PdfReader

from dashboard_export.exporter.config import ExportOptions, PageFormatSpec
from dashboard_export.exporter.output import EncodingError, ReportLabEncoder, create_encoder
from dashboard_export.exporter.output import renderer
from dashboard_export.exporter.output.renderer import _transform_y, _visible_band


MM_TO_PT = 72 / 25.4
TOLERANCE_PT = 0.5


@pytest.fixture
def a4_encoder(tmp_path):
    return ReportLabEncoder(PageFormatSpec(210, 297), output_dir=tmp_path)


class TestReportLabEncoder:
    def test_starts_with_one_page(self, a4_encoder):
        assert a4_encoder.page_count == 1

    def test_saves_pages_with_page_size(self, tmp_path, a4_encoder):
        image = Image.new("RGB", (100, 250), "navy")
        a4_encoder.draw_image(image, 0, 0, 210, 525)
        a4_encoder.new_page()
        a4_encoder.draw_image(image, 0, -297, 210, 525)

        path = a4_encoder.save("out.pdf")

        assert path == tmp_path / "out.pdf"
        reader = PdfReader(path)
        assert len(reader.pages) == 2
        for page in reader.pages:
            assert float(page.mediabox.width) == pytest.approx(210 * MM_TO_PT, abs=TOLERANCE_PT)
            assert float(page.mediabox.height) == pytest.approx(297 * MM_TO_PT, abs=TOLERANCE_PT)

    def test_blank_document_still_has_a_page(self, a4_encoder):
        path = a4_encoder.save("blank.pdf")

        assert len(PdfReader(path).pages) == 1

    def test_text_is_written(self, a4_encoder):
        a4_encoder.draw_text("Generated on: today", 10, 10, 8, color=(128, 128, 128))

        path = a4_encoder.save("text.pdf")

        assert "Generated on: today" in PdfReader(path).pages[0].extract_text()

    def test_save_creates_parent_directories(self, tmp_path):
        encoder = ReportLabEncoder(PageFormatSpec(216, 210), output_dir=tmp_path / "a" / "b")

        path = encoder.save("nested.pdf")

        assert path.exists()

    def test_cannot_draw_after_save(self, a4_encoder):
        a4_encoder.save("done.pdf")

        with pytest.raises(EncodingError):
            a4_encoder.new_page()
        with pytest.raises(EncodingError):
            a4_encoder.save("again.pdf")

    def test_same_image_encoded_once(self, a4_encoder):
        image = Image.new("RGB", (10, 10))

        assert a4_encoder._reader_for(image) is a4_encoder._reader_for(image)
        assert a4_encoder._reader_for(Image.new("RGB", (10, 10))) is not a4_encoder._reader_for(image)

    def test_write_failure_is_encoding_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        encoder = ReportLabEncoder(PageFormatSpec(210, 297), output_dir=blocker)

        with pytest.raises(EncodingError):
            encoder.save("x.pdf")

    def test_invalid_quality_rejected(self):
        with pytest.raises(ValueError):
            ReportLabEncoder(PageFormatSpec(210, 297), jpeg_quality=0)
        with pytest.raises(ValueError):
            ReportLabEncoder(PageFormatSpec(210, 297), jpeg_quality=101)


class TestCreateEncoder:
    def test_uses_options_geometry_and_quality(self, tmp_path):
        options = ExportOptions(page_format="letter", orientation="landscape", quality=0.5)

        encoder = create_encoder(options, output_dir=tmp_path)

        assert encoder.page_spec == PageFormatSpec(216.0, 210.0)
        assert encoder._jpeg_quality == 50


class TestTransformY:
    def test_top_of_page_maps_to_page_height_minus_element(self):
        page_height_pt = 297 * MM_TO_PT
        assert _transform_y(page_height_pt, 0, 297) == pytest.approx(0.0)
        assert _transform_y(page_height_pt, 10, 20) == pytest.approx((297 - 30) * MM_TO_PT)

    def test_negative_offset_places_image_above_page(self):
        page_height_pt = 297 * MM_TO_PT
        # Image slid up one page: its bottom sits 228mm below the page top
        assert _transform_y(page_height_pt, -297, 525) == pytest.approx((297 - 228) * MM_TO_PT)


class TestOversizedRaster:
    def test_raster_taller_than_jpeg_limit_is_drawn_per_page(self, a4_encoder):
        tall = Image.new("RGB", (10, 70000), "white")

        a4_encoder.draw_image(tall, 0, 0, 210, 1470000)
        a4_encoder.new_page()
        a4_encoder.draw_image(tall, 0, -297, 210, 1470000)
        path = a4_encoder.save("tall.pdf")

        assert len(PdfReader(path).pages) == 2

    def test_raster_wider_than_jpeg_limit_is_downscaled(self, monkeypatch):
        monkeypatch.setattr(renderer, "JPEG_MAX_DIMENSION", 50)
        wide = Image.new("RGB", (100, 200), "white")

        band, y_mm, height_mm = _visible_band(wide, 0, 200, 297)

        assert band.size == (50, 100)
        assert y_mm == pytest.approx(0)
        assert height_mm == pytest.approx(200)


class TestVisibleBand:
    @pytest.fixture
    def image(self):
        # 1 px per mm when drawn 1000mm tall
        return Image.new("RGB", (10, 1000), "white")

    def test_crops_rows_shown_on_page(self, image):
        band, y_mm, height_mm = _visible_band(image, -300, 1000, 297)

        assert band.size == (10, 297)
        assert y_mm == pytest.approx(0)
        assert height_mm == pytest.approx(297)

    def test_last_page_keeps_only_remaining_rows(self, image):
        band, y_mm, height_mm = _visible_band(image, -891, 1000, 297)

        assert band.size == (10, 109)
        assert y_mm == pytest.approx(0)
        assert height_mm == pytest.approx(109)

    def test_image_offset_below_page_top(self, image):
        band, y_mm, height_mm = _visible_band(image, 30, 1000, 297)

        assert band.size == (10, 267)
        assert y_mm == pytest.approx(30)
        assert height_mm == pytest.approx(267)

    @pytest.mark.parametrize("y_mm", [-1000, -1500, 297, 400])
    def test_nothing_visible_returns_none(self, image, y_mm):
        assert _visible_band(image, y_mm, 1000, 297) is None
