"""
Image export for finished pixel buffers.

This module writes the renderer's RGB buffers to disk with Pillow,
embedding a JSON description of the render in formats that support text
metadata.
"""

import numpy as np
from typing import Any, Dict, Optional, Tuple
from pathlib import Path
from dataclasses import dataclass, asdict
import json
import logging
from datetime import datetime

from PIL import Image, PngImagePlugin

from .. import __version__
from ..exceptions import ExportError

logger = logging.getLogger(__name__)

METADATA_KEY = "fractl"


@dataclass
class RenderMetadata:
    """Metadata for fractal renders."""

    # Fractal parameters
    fractal_type: str
    resolution: Tuple[int, int]  # width, height
    constant: Tuple[float, float]
    zoom: float
    pan: Tuple[float, float]
    max_iterations: int

    # Rendering parameters
    gradient: str = ""
    render_time_seconds: float = 0.0
    num_workers: int = 1

    # Generation info
    timestamp: str = ""
    software_version: str = __version__

    def __post_init__(self):
        """Set default timestamp if not provided."""
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenderMetadata':
        """Create metadata from dictionary."""
        data = dict(data)
        for key in ('resolution', 'constant', 'pan'):
            if key in data:
                data[key] = tuple(data[key])
        return cls(**data)

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        """Create metadata from JSON string."""
        return cls.from_dict(json.loads(json_str))


class ImageExporter:
    """Pillow-based image export with metadata support."""

    def __init__(self):
        """Initialize image exporter."""
        self.supported_formats = {
            '.png': self._save_png,
            '.tiff': self._save_tiff,
            '.tif': self._save_tiff,
            '.jpg': self._save_jpeg,
            '.jpeg': self._save_jpeg,
            '.bmp': self._save_bmp,
        }

    def save_image(self, image_array: np.ndarray, filepath: Path,
                   metadata: Optional[RenderMetadata] = None, quality: int = 95) -> Path:
        """
        Save RGB pixel buffer to file.

        Args:
            image_array: uint8 RGB buffer (height, width, 3)
            filepath: Output file path; the suffix selects the format
            metadata: Render metadata to embed
            quality: JPEG quality (1-100)

        Returns:
            Path that was written
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()

        if suffix not in self.supported_formats:
            supported = ', '.join(self.supported_formats.keys())
            raise ExportError(f"Unsupported format '{suffix}'. Supported: {supported}")

        image_array = self._prepare_image_array(image_array)
        pil_image = Image.fromarray(image_array)

        save_method = self.supported_formats[suffix]
        save_method(pil_image, filepath, metadata, quality)

        logger.info(f"Saved image: {filepath} ({pil_image.size[0]}x{pil_image.size[1]})")
        return filepath

    def _prepare_image_array(self, image_array: np.ndarray) -> np.ndarray:
        """Validate the buffer layout before handing it to Pillow."""
        if image_array.ndim != 3 or image_array.shape[2] != 3:
            raise ExportError(f"Expected RGB image array (H, W, 3), got {image_array.shape}")
        if image_array.size == 0:
            raise ExportError("Cannot save an empty image")
        if image_array.dtype != np.uint8:
            raise ExportError(f"Expected uint8 pixels, got {image_array.dtype}")
        return np.ascontiguousarray(image_array)

    def _save_png(self, pil_image: Image.Image, filepath: Path,
                  metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as PNG with metadata in a text chunk."""
        pnginfo = PngImagePlugin.PngInfo()

        if metadata:
            pnginfo.add_text("Software", f"fractl v{metadata.software_version}")
            pnginfo.add_text("Creation Time", metadata.timestamp)
            pnginfo.add_text(METADATA_KEY, metadata.to_json())

        pil_image.save(filepath, "PNG", pnginfo=pnginfo)

    def _save_tiff(self, pil_image: Image.Image, filepath: Path,
                   metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as TIFF, description tag carrying the metadata."""
        save_kwargs = {'compression': 'tiff_lzw'}
        if metadata:
            save_kwargs['description'] = metadata.to_json()
        pil_image.save(filepath, "TIFF", **save_kwargs)

    def _save_jpeg(self, pil_image: Image.Image, filepath: Path,
                   metadata: Optional[RenderMetadata], quality: int) -> None:
        """Save as JPEG with a companion JSON metadata file."""
        pil_image.save(filepath, "JPEG", quality=quality, optimize=True)
        if metadata:
            self._write_sidecar(filepath, metadata)

    def _save_bmp(self, pil_image: Image.Image, filepath: Path,
                  metadata: Optional[RenderMetadata], quality: int) -> None:
        pil_image.save(filepath, "BMP")
        if metadata:
            self._write_sidecar(filepath, metadata)

    def _write_sidecar(self, filepath: Path, metadata: RenderMetadata) -> None:
        json_path = filepath.with_suffix('.json')
        json_path.write_text(metadata.to_json(), encoding='utf-8')
        logger.info(f"Saved metadata: {json_path}")

    def extract_metadata_from_image(self, filepath: Path) -> Optional[RenderMetadata]:
        """
        Read embedded render metadata back from a PNG.

        Args:
            filepath: Image file path

        Returns:
            RenderMetadata if the image carries it, otherwise None
        """
        with Image.open(filepath) as img:
            text = img.info.get(METADATA_KEY)
        if text is None:
            return None
        return RenderMetadata.from_json(text)
