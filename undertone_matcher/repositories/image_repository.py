from __future__ import annotations
import logging
import os
from io import BytesIO
from pathlib import Path
from typing import Union, Iterable, Iterator

import cv2
import numpy as np
from PIL import Image as PILImage, UnidentifiedImageError
from dotenv import load_dotenv

from ..models.errors import InvalidInputError
from ..models.image import Image

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


class ImageRepository:
    """
    Handles decoding images from disk or raw bytes into Image entities.
    """
    def __init__(self):
        exts = os.getenv("VALID_IMAGE_EXTENSIONS", ".jpg,.jpeg,.png,.bmp,.webp")
        self.VALID_EXTS = {ext.strip().lower() for ext in exts.split(",") if ext.strip()}

    @staticmethod
    def load(path: Union[str, Path], rgb: bool = True) -> Image:
        path = Path(path)
        arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if arr_bgr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        arr = cv2.cvtColor(arr_bgr, cv2.COLOR_BGR2RGB) if rgb else arr_bgr
        return Image(pixels=arr, path=path)

    @staticmethod
    def decode(data: bytes, name: str | None = None) -> Image:
        """
        Decode an uploaded image (any format Pillow reads) to RGB. Alpha is dropped.
        """
        if not data:
            raise InvalidInputError("Uploaded image is empty")
        try:
            with PILImage.open(BytesIO(data)) as pil_img:
                pixels = np.asarray(pil_img.convert("RGB"))
        except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError) as err:
            raise InvalidInputError(f"Could not decode image {name or ''}: {err}".strip()) from err
        return Image(pixels=pixels, path=Path(name) if name else None)

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Image]:
        """
        Yield Image objects one at a time.  Nothing accumulates in memory.
        Unreadable files are logged and skipped.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed or not p.is_file():
                logger.debug(f"Skipping {p}")
                continue
            try:
                yield self.load(p)
            except FileNotFoundError as err:
                logger.warning(f"Skipping {p.name}: {err}")

