import base64
from pathlib import Path

import pytest

from app import create_app
from config import TestingConfig
from models import db
from services import get_record_store

# Smallest payload that still starts like a JPEG
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"
JPEG_DATA_URL = "data:image/jpeg;base64," + base64.b64encode(JPEG_BYTES).decode("ascii")


def _make_app(tmp_path, mode):
    class Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'test.db'}"
        IMAGE_FOLDER = str(tmp_path / "images")
        STORE_MODE = mode

    app = create_app(Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app(tmp_path):
    yield from _make_app(tmp_path, "customers")


@pytest.fixture
def flat_app(tmp_path):
    yield from _make_app(tmp_path, "flat")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def flat_client(flat_app):
    return flat_app.test_client()


@pytest.fixture
def store(app):
    with app.app_context():
        yield get_record_store()


@pytest.fixture
def flat_store(flat_app):
    with flat_app.app_context():
        yield get_record_store()


@pytest.fixture
def image_dir(app):
    return Path(app.config["IMAGE_FOLDER"])
