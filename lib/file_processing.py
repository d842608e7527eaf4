# =============================================================================
# lib/file_processing.py - Attachment Processing
# =============================================================================
# Pure helpers applied to uploaded attachments before they are stored:
# - Images: re-encode as JPEG within 1920x1920, 200x200 thumbnail
# - PDFs: text extraction for the chat context
#
# Everything works on bytes; storage paths are decided by the service.
# =============================================================================

import io
import logging

from PIL import Image, ImageOps
from pypdf import PdfReader

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = [
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "application/pdf",
]

MAX_IMAGE_SIZE = (1920, 1920)
IMAGE_QUALITY = 85

THUMBNAIL_SIZE = 200
THUMBNAIL_QUALITY = 80


def is_allowed_file_type(content_type: str | None) -> bool:
    return content_type in ALLOWED_MIME_TYPES


def is_valid_file_size(size: int, max_size: int) -> bool:
    return 0 < size <= max_size


def is_image(content_type: str | None) -> bool:
    return bool(content_type) and content_type.startswith("image/")


def is_pdf(content_type: str | None) -> bool:
    return content_type == "application/pdf"


# =============================================================================
# Images
# =============================================================================

def _to_rgb(image: Image.Image) -> Image.Image:
    # JPEG has no alpha channel; flatten transparency onto white
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        image = image.convert("RGBA")
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[-1])
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def compress_image(
    data: bytes,
    max_size: tuple[int, int] = MAX_IMAGE_SIZE,
    quality: int = IMAGE_QUALITY,
) -> bytes:
    """
    Re-encode an image as JPEG, shrinking it to fit within max_size.

    Images already inside the box keep their dimensions; the aspect
    ratio is always preserved.

    Args:
        data: Original image bytes (any format Pillow can open)
        max_size: (width, height) bounding box
        quality: JPEG quality

    Returns:
        JPEG bytes
    """
    with Image.open(io.BytesIO(data)) as image:
        image = ImageOps.exif_transpose(image)
        image.thumbnail(max_size, Image.Resampling.LANCZOS)
        image = _to_rgb(image)

        output = io.BytesIO()
        image.save(output, format="JPEG", quality=quality, optimize=True)
        return output.getvalue()


def create_thumbnail(data: bytes, size: int = THUMBNAIL_SIZE) -> bytes:
    """Square JPEG thumbnail, center-cropped to cover size x size."""
    with Image.open(io.BytesIO(data)) as image:
        image = ImageOps.exif_transpose(image)
        image = _to_rgb(image)
        thumbnail = ImageOps.fit(image, (size, size), Image.Resampling.LANCZOS)

        output = io.BytesIO()
        thumbnail.save(output, format="JPEG", quality=THUMBNAIL_QUALITY)
        return output.getvalue()


def get_image_dimensions(data: bytes) -> tuple[int, int]:
    """(width, height) of an image."""
    with Image.open(io.BytesIO(data)) as image:
        return image.size


# =============================================================================
# PDFs
# =============================================================================

def extract_pdf_text(data: bytes) -> tuple[str, int]:
    """
    Extract the text layer of a PDF.

    Returns:
        (text, page_count); pages are separated by blank lines

    Raises:
        Exception: If pypdf cannot read the document
    """
    reader = PdfReader(io.BytesIO(data))
    pages_text = []
    for page in reader.pages:
        text = page.extract_text() or ""
        if text.strip():
            pages_text.append(text.strip())

    logger.debug(f"Extracted text from {len(reader.pages)} PDF pages")
    return "\n\n".join(pages_text), len(reader.pages)
