"""Conversion between image files and base64 data URIs."""

import base64
import binascii
import mimetypes
import re
from pathlib import Path

# data:<mimetype>;base64,<encoded_data>
DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>[A-Za-z0-9+/=\s]+)$"
)

# Inline image requests to the model are capped at 20MB
MAX_IMAGE_BYTES = 20 * 1024 * 1024


def guess_image_mime_type(path: Path) -> str:
    """Return the image mime type for ``path`` based on its extension.

    Raises:
        ValueError: If the extension is unknown or not an image type
    """
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise ValueError(f"Not an image file: {path.name}")
    return mime_type


def image_to_data_uri(path: str | Path) -> str:
    """Read an image file and encode it as a base64 data URI.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not an image, is empty or is too large
    """
    path = Path(path)
    mime_type = guess_image_mime_type(path)
    data = path.read_bytes()

    if not data:
        raise ValueError(f"Image file is empty: {path}")
    if len(data) > MAX_IMAGE_BYTES:
        raise ValueError(
            f"Image is {len(data) / 1_048_576:.1f}MB; the limit is "
            f"{MAX_IMAGE_BYTES // 1_048_576}MB"
        )

    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 data URI into its mime type and decoded bytes.

    Raises:
        ValueError: If the URI is not ``data:<mime>;base64,<data>`` or the
            payload is not valid base64
    """
    match = DATA_URI_PATTERN.match(uri.strip())
    if not match:
        raise ValueError(
            "Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'"
        )

    try:
        data = base64.b64decode(match.group("data"), validate=False)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload in data URI: {e}") from e

    if not data:
        raise ValueError("Data URI has an empty payload")

    return match.group("mime"), data
