"""Cloudinary client helpers that do not need the network."""

import asyncio
import hashlib

import pytest

from qrbites.infrastructure.cloudinary_api import CloudinaryClient, StorageError, public_id_from_url


@pytest.mark.parametrize(
    "url, expected",
    [
        (
            "https://res.cloudinary.com/demo/image/upload/v1712/qrbites/menus/menu-abc123.jpg",
            "qrbites/menus/menu-abc123",
        ),
        ("https://res.cloudinary.com/demo/image/upload/qrbites/qrcodes/4f1c.png", "qrbites/qrcodes/4f1c"),
        ("https://example.com/logo.png", None),
        ("", None),
        (None, None),
    ],
)
def test_public_id_from_url(url, expected) -> None:
    assert public_id_from_url(url) == expected


def test_signature_skips_empty_params_and_sorts_keys() -> None:
    client = CloudinaryClient(cloud_name="demo", api_key="key", api_secret="shh")

    signature = client._sign({"timestamp": 100, "folder": "qrbites/menus", "public_id": None})

    assert signature == hashlib.sha1(b"folder=qrbites/menus&timestamp=100shh").hexdigest()


def test_unconfigured_client_refuses_uploads() -> None:
    client = CloudinaryClient(cloud_name="", api_key="", api_secret="")

    assert client.is_configured is False
    with pytest.raises(StorageError, match="not configured"):
        asyncio.run(client.upload(b"data", "menus"))


def test_destroy_url_skips_foreign_urls() -> None:
    client = CloudinaryClient(cloud_name="", api_key="", api_secret="")

    assert asyncio.run(client.destroy_url("https://example.com/logo.png")) is False
