"""Persistence services - record store and image files."""

from .errors import ScanDeskError, ValidationError, NotFoundError, StorageIOError
from .image_store import ImageStore, decode_data_url
from .record_store import RecordStore, get_record_store

__all__ = [
    "ScanDeskError",
    "ValidationError",
    "NotFoundError",
    "StorageIOError",
    "ImageStore",
    "decode_data_url",
    "RecordStore",
    "get_record_store",
]
