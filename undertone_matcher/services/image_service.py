from pathlib import Path
from typing import Iterable, Union, Iterator
from ..models.image import Image
from ..repositories.image_repository import ImageRepository


class ImageService:
    """I/O helpers.  No colour logic here."""
    def __init__(self):
        self.image_repository = ImageRepository()

    def load(self, path: Union[str, Path]) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def decode(self, data: bytes, name: str = None) -> Image:
        """Decode uploaded bytes into an Image object."""
        return self.image_repository.decode(data, name)

    def is_allowed(self, filename: str) -> bool:
        return Path(filename).suffix.lower() in self.image_repository.VALID_EXTS

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] = None,
    ) -> Iterator[Image]:
        """
        Yield images lazily instead of returning a gigantic list.
        """
        return self.image_repository.iter_dir(folder,
                                              recursive=recursive,
                                              exts=exts)

