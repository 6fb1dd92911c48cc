import logging

import pytest

from app import create_app
from config import TestingConfig


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "ok"
    assert body["mode"] == "customers"


def test_image_folder_is_created(app, image_dir):
    assert image_dir.is_dir()
    assert image_dir.is_absolute()


def test_unknown_image(client):
    assert client.get("/images/missing.jpg").status_code == 404


def test_image_outside_folder(client):
    assert client.get("/images/../test.db").status_code == 404


def test_invalid_store_mode(tmp_path):
    class Config(TestingConfig):
        STORE_MODE = "ledger"
        IMAGE_FOLDER = str(tmp_path / "images")

    with pytest.raises(ValueError):
        create_app(Config)


def test_file_logging(tmp_path):
    log_dir = tmp_path / "logs"

    class Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'test.db'}"
        IMAGE_FOLDER = str(tmp_path / "images")
        LOG_DIR = str(log_dir)

    create_app(Config)
    try:
        assert (log_dir / "scandesk.log").exists()
        assert (log_dir / "scandesk_errors.log").exists()
    finally:
        root = logging.getLogger()
        for handler in list(root.handlers):
            if str(log_dir) in getattr(handler, "baseFilename", ""):
                root.removeHandler(handler)
                handler.close()
