import pytest
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import Image

# Add src to sys.path so we can import dashboard_export
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from dashboard_export.exporter.capture import (  # noqa: E402
    CaptureSettings,
    CapturedRegion,
    Rasterizer,
    RegionNotFoundError,
)
from dashboard_export.exporter.output import DocumentEncoder, EncodingError  # noqa: E402


FIXED_NOW = datetime(2026, 3, 14, 9, 26, 53)


class RecordingEncoder(DocumentEncoder):
    """Encoder that records drawing commands instead of rendering."""

    def __init__(self, output_dir: Path, fail_on: Optional[str] = None) -> None:
        self.output_dir = output_dir
        self.fail_on = fail_on
        self.ops: List[tuple] = []
        self.saved_as: Optional[str] = None
        self._pages = 1

    @property
    def page_count(self) -> int:
        return self._pages

    def _maybe_fail(self, op: str) -> None:
        if self.fail_on == op:
            raise EncodingError(f"{op} rejected")

    def new_page(self) -> None:
        self._maybe_fail("new_page")
        self._pages += 1
        self.ops.append(("new_page",))

    def draw_image(self, image, x_mm, y_mm, width_mm, height_mm) -> None:
        self._maybe_fail("draw_image")
        self.ops.append(("image", self._pages, image, x_mm, y_mm, width_mm, height_mm))

    def draw_text(self, text, x_mm, y_mm, size, *, color=(0, 0, 0)) -> None:
        self._maybe_fail("draw_text")
        self.ops.append(("text", self._pages, text, x_mm, y_mm, size, color))

    def save(self, filename: str) -> Path:
        self._maybe_fail("save")
        self.saved_as = filename
        return self.output_dir / filename

    # Helpers for assertions
    def images(self) -> List[tuple]:
        return [op for op in self.ops if op[0] == "image"]

    def texts(self) -> List[tuple]:
        return [op for op in self.ops if op[0] == "text"]


class FakeRasterizer(Rasterizer):
    """Rasterizer returning solid images of preset sizes (already scaled)."""

    def __init__(self, regions: Dict[str, Tuple[int, int]]) -> None:
        self.regions = regions
        self.calls: List[Tuple[str, CaptureSettings]] = []

    def content_extent(self, region_id: str) -> Tuple[int, int]:
        if region_id not in self.regions:
            raise RegionNotFoundError(region_id)
        return self.regions[region_id]

    def capture(self, region_id: str, settings: CaptureSettings) -> CapturedRegion:
        if region_id not in self.regions:
            raise RegionNotFoundError(region_id)
        self.calls.append((region_id, settings))
        width, height = self.regions[region_id]
        return CapturedRegion.from_image(Image.new("RGB", (width, height), "white"))


# Common test fixtures
@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def recording_encoder(tmp_path: Path):
    """RecordingEncoder writing (nominally) into tmp_path."""
    encoder = RecordingEncoder(tmp_path)
    return encoder


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def encoder_factory(recording_encoder):
    """Encoder factory for DocumentAssembler that always returns recording_encoder."""
    return lambda options: recording_encoder


@pytest.fixture
def fake_rasterizer_cls():
    return FakeRasterizer
