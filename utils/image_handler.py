"""
Recipe Image Handling

Checks photos uploaded for a recipe and re-encodes them through PIL. Only
the re-encoded JPEG bytes are stored on the recipe row, never the upload
as received.
"""

from io import BytesIO

from PIL import Image


class ImageValidationError(Exception):
    """Raised when an uploaded recipe photo is rejected."""
    pass


# PIL format names accepted on upload
ALLOWED_FORMATS = {'JPEG', 'PNG', 'GIF', 'WEBP'}

# Hard limits on what we are willing to decode
MAX_SOURCE_SIDE = 4096
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

# Stored photos are scaled down to fit this box
STORED_MAX_SIDE = 2048
JPEG_QUALITY = 85

OUTPUT_CONTENT_TYPE = 'image/jpeg'


def _read_upload(image_data):
    """Bytes of an upload given as raw bytes or a file-like object (FileStorage)."""
    if isinstance(image_data, bytes):
        content = image_data
    else:
        image_data.seek(0)
        content = image_data.read()
    if not content:
        raise ImageValidationError("Image file is empty")
    if len(content) > MAX_UPLOAD_BYTES:
        raise ImageValidationError(f"Image too large: {len(content)} bytes (max {MAX_UPLOAD_BYTES})")
    return content


def _open_checked(content):
    # verify() consumes the image, so decode a second time for real use
    Image.open(BytesIO(content)).verify()
    img = Image.open(BytesIO(content))

    if img.format not in ALLOWED_FORMATS:
        raise ImageValidationError(
            f"Unsupported image format: {img.format}. "
            f"Use one of: {', '.join(sorted(ALLOWED_FORMATS))}"
        )

    width, height = img.size
    if width > MAX_SOURCE_SIDE or height > MAX_SOURCE_SIDE:
        raise ImageValidationError(
            f"Image dimensions too large: {width}x{height} "
            f"(max {MAX_SOURCE_SIDE}x{MAX_SOURCE_SIDE})"
        )
    return img


def _to_rgb(img):
    """JPEG has no alpha: composite transparent images onto white."""
    if img.mode == 'P':
        img = img.convert('RGBA')
    if img.mode in ('RGBA', 'LA'):
        background = Image.new('RGB', img.size, (255, 255, 255))
        background.paste(img, mask=img.getchannel('A'))
        return background
    if img.mode != 'RGB':
        return img.convert('RGB')
    return img


def validate_and_process_image(image_data, max_side=STORED_MAX_SIDE):
    """
    Check an uploaded recipe photo and re-encode it as JPEG.

    Args:
        image_data: Raw bytes or a file-like object such as werkzeug's FileStorage
        max_side: Longest side of the stored image; larger photos are shrunk

    Returns:
        tuple: (jpeg_bytes, content_type)

    Raises:
        ImageValidationError: If the upload is not an acceptable image
    """
    content = _read_upload(image_data)

    try:
        img = _open_checked(content)
        if max(img.size) > max_side:
            img.thumbnail((max_side, max_side), Image.Resampling.LANCZOS)

        output = BytesIO()
        _to_rgb(img).save(output, 'JPEG', quality=JPEG_QUALITY, optimize=True)
        return output.getvalue(), OUTPUT_CONTENT_TYPE

    except ImageValidationError:
        raise
    except Image.DecompressionBombError:
        raise ImageValidationError("Image appears to be a decompression bomb (too large when decoded)")
    except Exception as e:
        raise ImageValidationError(f"Invalid or corrupted image: {str(e)}")
