from pathlib import Path

import pytest

from itemlister.processor.exceptions import ImageNotFoundError, InvalidImagePathError
from itemlister.processor.file_loader import FileLoader


class TestFileLoader:
    def test_save_then_load(self, tmp_path: Path) -> None:
        loader = FileLoader(tmp_path / "uploads")
        name = loader.save("Card Front.JPG", b"jpeg-bytes")
        assert name.endswith(".jpg")
        assert name != "Card Front.JPG"
        assert loader.load(name) == b"jpeg-bytes"

    def test_save_uses_unique_names(self, tmp_path: Path) -> None:
        loader = FileLoader(tmp_path)
        assert loader.save("a.png", b"1") != loader.save("a.png", b"2")

    def test_save_rejects_non_images(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidImagePathError, match="Unsupported image type"):
            FileLoader(tmp_path).save("notes.txt", b"x")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ImageNotFoundError):
            FileLoader(tmp_path).load("nope.jpg")

    @pytest.mark.parametrize("name", ["../secret.jpg", "", "a/../../b.jpg"])
    def test_rejects_paths_outside_upload_dir(self, tmp_path: Path, name: str) -> None:
        loader = FileLoader(tmp_path / "uploads")
        with pytest.raises(InvalidImagePathError):
            loader.load(name)
