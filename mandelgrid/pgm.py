"""Exporting score grids as PGM text or raw-count images."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import PIL.Image

# PNG stores grayscale counts in at most 16 bits.
PNG_MAX_VALUE = np.iinfo(np.uint16).max


def format_pgm(scores: np.ndarray, max_value: int) -> str:
    """Render ``scores`` as a plain (``P2``) PGM document."""

    height, width = scores.shape
    lines = ["P2", f"{width} {height}", f"{max_value}"]
    for row in scores:
        lines.append(" ".join(f"{int(value):3d}" for value in row))
    return "\n".join(lines) + "\n"


def write_pgm(scores: np.ndarray, max_value: int, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(format_pgm(scores, max_value))


def pillow_format(image_format: str) -> Optional[str]:
    """Map an extension such as ``"tif"`` to the Pillow format that saves it.

    Returns ``None`` when Pillow has no writer for the extension.
    """

    extension = "." + image_format.lower().lstrip(".")
    name = PIL.Image.registered_extensions().get(extension)
    if name is None or name not in PIL.Image.SAVE:
        return None
    return name


def scores_to_image(scores: np.ndarray, pil_format: str = "TIFF") -> PIL.Image.Image:
    """Wrap the raw iteration counts in an integer grayscale image.

    PNG gets a 16-bit ``"I;16"`` image, every other format a 32-bit ``"I"`` one.
    """

    if pil_format == "PNG":
        if scores.size and int(scores.max()) > PNG_MAX_VALUE:
            raise ValueError(f"PNG holds scores up to {PNG_MAX_VALUE}, got {int(scores.max())}.")
        return PIL.Image.fromarray(np.ascontiguousarray(scores, dtype=np.uint16))
    return PIL.Image.fromarray(np.ascontiguousarray(scores, dtype=np.int32))


def write_image(scores: np.ndarray, output_path: Path, image_format: str) -> None:
    """Write ``scores`` to ``output_path`` using the Pillow writer for ``image_format``."""

    pil_format = pillow_format(image_format)
    if pil_format is None:
        raise ValueError(f"Pillow cannot write {image_format!r} images.")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    scores_to_image(scores, pil_format).save(str(output_path), format=pil_format)
