"""QR code rendering and upload."""

import asyncio

from qrbites.application.services.qr_code_service import (
    build_menu_public_url,
    generate_menu_qr_code,
    render_qr_png,
)


def test_public_url_points_at_the_redirect_route() -> None:
    assert build_menu_public_url(12, 3) == "http://api.test/r/12?restaurant=3"


def test_render_qr_png_returns_png_bytes() -> None:
    png = render_qr_png("http://api.test/r/1?restaurant=1")
    assert png.startswith(b"\x89PNG\r\n\x1a\n")


def test_generate_menu_qr_code_uploads_to_qrcodes_folder(storage) -> None:
    url = asyncio.run(generate_menu_qr_code(storage, 5, 2))

    (public_id,) = storage.uploads
    assert public_id.startswith("qrbites/qrcodes/")
    assert url.endswith(f"{public_id}.png")


def test_each_generation_gets_a_fresh_file(storage) -> None:
    first = asyncio.run(generate_menu_qr_code(storage, 5, 2))
    second = asyncio.run(generate_menu_qr_code(storage, 5, 2))

    assert first != second
