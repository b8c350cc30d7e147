import json

import numpy as np
import pytest
from PIL import Image

from fractl import ExportError
from fractl.rendering.image_output import ImageExporter, RenderMetadata


@pytest.fixture
def pixels():
    image = np.zeros((6, 10, 3), dtype=np.uint8)
    image[:, :5] = (255, 0, 0)
    return image


@pytest.fixture
def metadata():
    return RenderMetadata(
        fractal_type='julia',
        resolution=(10, 6),
        constant=(-0.8, 0.156),
        zoom=1.0,
        pan=(0.0, 0.0),
        max_iterations=500,
        gradient='grayscale',
    )


def test_png_round_trip_keeps_pixels_and_metadata(tmp_path, pixels, metadata):
    path = ImageExporter().save_image(pixels, tmp_path / "out.png", metadata)

    with Image.open(path) as img:
        assert img.size == (10, 6)
        assert np.array_equal(np.asarray(img.convert('RGB')), pixels)

    restored = ImageExporter().extract_metadata_from_image(path)
    assert restored == metadata


def test_png_without_metadata(tmp_path, pixels):
    path = ImageExporter().save_image(pixels, tmp_path / "plain.png")
    assert ImageExporter().extract_metadata_from_image(path) is None


def test_jpeg_writes_sidecar(tmp_path, pixels, metadata):
    ImageExporter().save_image(pixels, tmp_path / "out.jpg", metadata)
    sidecar = json.loads((tmp_path / "out.json").read_text())
    assert sidecar['max_iterations'] == 500
    assert set(sidecar) == {
        'fractal_type', 'resolution', 'constant', 'zoom', 'pan', 'max_iterations',
        'gradient', 'render_time_seconds', 'num_workers', 'timestamp', 'software_version',
    }


def test_tiff_and_bmp(tmp_path, pixels):
    exporter = ImageExporter()
    for name in ("out.tiff", "out.bmp"):
        exporter.save_image(pixels, tmp_path / name)
        with Image.open(tmp_path / name) as img:
            assert np.array_equal(np.asarray(img.convert('RGB')), pixels)


def test_unsupported_suffix(tmp_path, pixels):
    with pytest.raises(ExportError, match="Unsupported format"):
        ImageExporter().save_image(pixels, tmp_path / "out.mp4")


def test_empty_buffer_cannot_be_saved(tmp_path):
    with pytest.raises(ExportError, match="empty"):
        ImageExporter().save_image(np.zeros((0, 0, 3), dtype=np.uint8), tmp_path / "out.png")


def test_buffer_layout_is_checked(tmp_path):
    with pytest.raises(ExportError):
        ImageExporter().save_image(np.zeros((4, 4), dtype=np.uint8), tmp_path / "out.png")
    with pytest.raises(ExportError):
        ImageExporter().save_image(np.zeros((4, 4, 3), dtype=np.float64), tmp_path / "out.png")
