import base64
import shutil

import pytest

from conftest import JPEG_BYTES, JPEG_DATA_URL
from services import ImageStore, StorageIOError, ValidationError, decode_data_url
from services.image_store import extension_for


class TestDecodeDataUrl:
    def test_jpeg_data_url(self):
        assert decode_data_url(JPEG_DATA_URL) == JPEG_BYTES

    def test_raw_base64(self):
        assert decode_data_url(base64.b64encode(JPEG_BYTES).decode()) == JPEG_BYTES

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_no_image(self, value):
        assert decode_data_url(value) is None

    @pytest.mark.parametrize("value", [
        "data:image/jpeg;base64,not base64!!",
        "data:image/jpeg,rawpixels",
        "data:image/jpeg;base64",
    ])
    def test_malformed(self, value):
        with pytest.raises(ValidationError):
            decode_data_url(value)


@pytest.mark.parametrize("value, expected", [
    ("data:image/png;base64,AAAA", "png"),
    ("data:image/jpeg;base64,AAAA", "jpg"),
    ("data:application/octet-stream;base64,AAAA", "jpg"),
    ("AAAA", "jpg"),
    (None, "jpg"),
])
def test_extension_for(value, expected):
    assert extension_for(value) == expected


class TestImageStore:
    def test_creates_directory(self, tmp_path):
        root = tmp_path / "nested" / "images"
        ImageStore(root)
        assert root.is_dir()

    def test_save_and_read(self, tmp_path):
        images = ImageStore(tmp_path)
        name = images.save(JPEG_BYTES)

        assert (tmp_path / name).read_bytes() == JPEG_BYTES
        assert images.read(name) == JPEG_BYTES
        assert images.exists(name)

    def test_save_uses_extension(self, tmp_path):
        name = ImageStore(tmp_path).save(JPEG_BYTES, "png")
        assert name.endswith(".png")

    def test_delete(self, tmp_path):
        images = ImageStore(tmp_path)
        name = images.save(JPEG_BYTES)

        assert images.delete(name) is True
        assert not images.exists(name)
        assert images.delete(name) is False

    @pytest.mark.parametrize("path", [None, ""])
    def test_delete_nothing(self, tmp_path, path):
        assert ImageStore(tmp_path).delete(path) is False

    def test_path_outside_directory(self, tmp_path):
        images = ImageStore(tmp_path / "images")
        (tmp_path / "secret.txt").write_text("x")

        with pytest.raises(ValidationError):
            images.resolve("../secret.txt")

    def test_write_failure(self, tmp_path):
        root = tmp_path / "images"
        images = ImageStore(root)
        shutil.rmtree(root)

        with pytest.raises(StorageIOError):
            images.save(JPEG_BYTES)
