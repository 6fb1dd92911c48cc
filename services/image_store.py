"""Image files captured alongside scans."""

import base64
import binascii
import logging
import re
import uuid
from pathlib import Path
from typing import Optional

from .errors import StorageIOError, ValidationError

logger = logging.getLogger(__name__)

DATA_URL_RE = re.compile(r"^data:(?P<mimetype>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]*)*),(?P<data>.*)$", re.DOTALL)

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}
DEFAULT_EXTENSION = "jpg"


def decode_data_url(value: Optional[str]) -> Optional[bytes]:
    """Decode a base64 image payload.

    Args:
        value: A ``data:image/jpeg;base64,...`` URL as produced by a canvas
            ``toDataURL()`` call, or raw base64 data.

    Returns:
        The decoded bytes, or None when no image was supplied.

    Raises:
        ValidationError: If the payload is not valid base64.
    """
    if not value:
        return None
    value = value.strip()
    if not value:
        return None

    if value.startswith("data:"):
        match = DATA_URL_RE.match(value)
        if not match or ";base64" not in match.group("params"):
            raise ValidationError("Image must be a base64 encoded data URL")
        value = match.group("data")

    try:
        data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 image data: {e}") from e

    return data or None


def extension_for(value: Optional[str]) -> str:
    """File extension matching the mimetype of a data URL (jpg by default)."""
    if value and value.startswith("data:"):
        match = DATA_URL_RE.match(value.strip())
        if match and match.group("mimetype"):
            return EXTENSIONS.get(match.group("mimetype").lower(), DEFAULT_EXTENSION)
    return DEFAULT_EXTENSION


class ImageStore:
    """Stores image blobs as files under a single directory.

    Stored paths are relative to the directory, so rows stay valid when the
    directory is moved.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def save(self, data: bytes, extension: str = DEFAULT_EXTENSION) -> str:
        """Write image bytes to a new uniquely named file.

        Returns:
            The path of the new file relative to the image directory.

        Raises:
            StorageIOError: If the file cannot be written. A partially
                written file is removed.
        """
        filename = f"{uuid.uuid4().hex}.{extension.lstrip('.')}"
        path = self.root / filename
        try:
            # "x" so an existing file is never overwritten
            with open(path, "xb") as fh:
                fh.write(data)
        except OSError as e:
            logger.error(f"Could not write image {path}: {e}")
            path.unlink(missing_ok=True)
            raise StorageIOError(f"Could not write image: {e}", path=str(path)) from e

        logger.debug(f"Saved image {filename} ({len(data)} bytes)")
        return filename

    def resolve(self, relative_path: str) -> Path:
        """Absolute location of a stored image.

        Raises:
            ValidationError: If the path escapes the image directory.
        """
        root = self.root.resolve()
        path = (root / relative_path).resolve()
        if root != path and root not in path.parents:
            raise ValidationError(f"Image path outside image directory: {relative_path}")
        return path

    def exists(self, relative_path: Optional[str]) -> bool:
        if not relative_path:
            return False
        return self.resolve(relative_path).is_file()

    def read(self, relative_path: str) -> bytes:
        try:
            return self.resolve(relative_path).read_bytes()
        except OSError as e:
            raise StorageIOError(f"Could not read image: {e}", path=relative_path) from e

    def delete(self, relative_path: Optional[str]) -> bool:
        """Remove a stored image. Returns True if a file was removed."""
        if not relative_path:
            return False
        path = self.resolve(relative_path)
        if not path.is_file():
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Could not delete image {path}: {e}")
            raise StorageIOError(f"Could not delete image: {e}", path=str(path)) from e

        logger.debug(f"Deleted image {relative_path}")
        return True
