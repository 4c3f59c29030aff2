import base64
import io
import logging
import mimetypes
import random
import re
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote, urlencode

import pytesseract
import qrcode
from PIL import Image, ImageOps

from errors import UploadError
from settings import APP_BASE_URL, IMAGE_DIR, QR_SERVICE_URL, THEME_COLOR

logger = logging.getLogger(__name__)


def generate_id():
    return str(uuid.uuid4())


def timestamp():
    return datetime.now(timezone.utc).isoformat()


def generate_id_number(now_ms=None, rand=None):
    """
    Human-readable artifact number: ART-<epoch millis>-<4 digit random>.
    Two numbers drawn in the same millisecond with the same random draw collide;
    uniqueness is not guaranteed.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    if rand is None:
        rand = random.randint(0, 9999)
    return f"ART-{now_ms}-{rand:04d}"


def upload_file(photo, image_dir=IMAGE_DIR):
    """Store a picked photo and return {'file_url': ...} like a hosted upload would."""
    ext = Path(photo.name).suffix or mimetypes.guess_extension(photo.mime_type) or '.jpg'
    out_path = Path(image_dir) / f"{generate_id()}{ext.lower()}"
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, 'wb') as f:
            f.write(photo.data)
    except OSError as e:
        raise UploadError(f'Could not store {photo.name}: {e}') from e
    logger.info('Uploaded %s -> %s', photo.name, out_path)
    return {'file_url': str(out_path)}


def image_to_datauri(path):
    with open(path, 'rb') as f:
        data = f.read()
    mime = mimetypes.guess_type(str(path))[0] or 'image/png'
    b64 = base64.b64encode(data).decode('utf-8')
    return f"data:{mime};base64,{b64}"


def photo_preview_datauri(photo):
    b64 = base64.b64encode(photo.data).decode('utf-8')
    return f"data:{photo.mime_type};base64,{b64}"


def run_ocr(image_path):
    img = Image.open(image_path).convert('L')
    # basic preprocessing
    img = ImageOps.autocontrast(img)
    txt = pytesseract.image_to_string(img)
    return txt.strip()


# --- Links / QR ---

def artifact_url(artifact_id, base_url=APP_BASE_URL):
    return f"{base_url}/artifact?{urlencode({'id': artifact_id})}"


def qr_service_url(target_url, size=400, service_url=QR_SERVICE_URL):
    return f"{service_url}?size={size}x{size}&data={quote(target_url, safe='')}"


def generate_qr_png(target_url, fill_color=THEME_COLOR):
    qr = qrcode.QRCode(box_size=10, border=2)
    qr.add_data(target_url)
    qr.make(fit=True)
    img = qr.make_image(fill_color=fill_color, back_color="white")
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


def qr_filename(name):
    if not name:
        return 'artifact_qrcode.png'
    slug = re.sub(r'\s+', '_', name)
    return f"artifact_{slug}.png"


def google_maps_url(latitude, longitude):
    return f"https://www.google.com/maps?q={latitude},{longitude}"


def map_embed_url(latitude, longitude):
    return f"https://maps.google.com/maps?q={latitude},{longitude}&output=embed"


# --- Display formatting ---

def format_coordinates(latitude, longitude):
    return f"{latitude:.6f}, {longitude:.6f}"


def format_accuracy(accuracy):
    if accuracy is None:
        return 'Unknown'
    return f"±{accuracy:.1f} meters"


def format_discovery_date(value):
    """Returns ('October 19, 2026', '3:04 PM')."""
    day = f"{value.strftime('%B')} {value.day}, {value.year}"
    hour = value.hour % 12 or 12
    clock = f"{hour}:{value.strftime('%M')} {'AM' if value.hour < 12 else 'PM'}"
    return day, clock
