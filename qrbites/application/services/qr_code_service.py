"""QR code generation for public menu links."""

import uuid
from io import BytesIO

import qrcode
import structlog
from qrcode.constants import ERROR_CORRECT_H

from qrbites.config import get_settings
from qrbites.infrastructure.cloudinary_api import CloudinaryClient

logger = structlog.get_logger(__name__)

QR_FOLDER = "qrcodes"


def build_menu_public_url(menu_id: int, restaurant_id: int) -> str:
    """The URL a scanned code opens; stable for a menu/restaurant pair."""
    base_url = get_settings().API_URL.rstrip("/")
    return f"{base_url}/r/{menu_id}?restaurant={restaurant_id}"


def render_qr_png(data: str) -> bytes:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, border=1)
    qr.add_data(data)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


async def generate_qr_code(storage: CloudinaryClient, url: str) -> str:
    """Render url as a PNG code, store it and return its public URL."""
    png = render_qr_png(url)
    filename = f"{uuid.uuid4()}.png"
    result = await storage.upload(png, QR_FOLDER, public_id=filename.removesuffix(".png"), filename=filename)
    logger.info("QR code uploaded", url=url, qr_code_url=result["secure_url"])
    return result["secure_url"]


async def generate_menu_qr_code(storage: CloudinaryClient, menu_id: int, restaurant_id: int) -> str:
    return await generate_qr_code(storage, build_menu_public_url(menu_id, restaurant_id))
