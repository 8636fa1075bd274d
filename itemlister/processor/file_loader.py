import uuid
from pathlib import Path

from itemlister.processor.exceptions import ImageNotFoundError, InvalidImagePathError

ALLOWED_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})


class FileLoader:
    """Reads and writes uploaded images under a single upload directory."""

    def __init__(self, upload_dir: Path) -> None:
        self._upload_dir = Path(upload_dir)

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    def load(self, filename: str) -> bytes:
        """Read image bytes for `filename`.

        Raises:
            InvalidImagePathError: if the name escapes the upload directory.
            ImageNotFoundError: if the file does not exist.
        """
        path = self.resolve(filename)
        if not path.is_file():
            raise ImageNotFoundError(f"Image file not found: {filename}")
        return path.read_bytes()

    def save(self, original_name: str, content: bytes) -> str:
        """Store an upload under a fresh unique name and return that name."""
        extension = Path(original_name).suffix.lower()
        if extension not in ALLOWED_IMAGE_EXTENSIONS:
            raise InvalidImagePathError(
                f"Unsupported image type '{extension or original_name}'. "
                f"Allowed: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}"
            )
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        filename = f"{uuid.uuid4()}{extension}"
        (self._upload_dir / filename).write_bytes(content)
        return filename

    def resolve(self, filename: str) -> Path:
        root = self._upload_dir.resolve()
        path = (root / filename).resolve()
        if not filename or root not in path.parents:
            raise InvalidImagePathError(f"Invalid image filename: {filename!r}")
        return path
