"""Web utility functions for Unface"""

import base64
import binascii
import re

from ..moderation.age_classifier import InvalidImageError

# Header browsers put in front of canvas/FileReader exports
DATA_URI_PREFIX = re.compile(r'^data:image/\w+;base64,')

URLSAFE_ALPHABET = str.maketrans('-_', '+/')


def strip_data_uri(image: str) -> str:
    """Remove a leading ``data:image/<subtype>;base64,`` header if present."""
    return DATA_URI_PREFIX.sub('', image, count=1)


def decode_image_payload(image: str) -> bytes:
    """Decode a base64 image string, optionally data-URI prefixed.

    Whitespace is ignored, missing ``=`` padding is tolerated and the
    URL-safe alphabet (``-`` and ``_``) is accepted alongside the standard one.

    Args:
        image: Base64 encoded image

    Returns:
        Decoded image bytes, never empty

    Raises:
        InvalidImageError: If the string is not valid base64 or decodes to nothing
    """
    encoded = ''.join(strip_data_uri(image).split())
    encoded = encoded.translate(URLSAFE_ALPHABET)
    encoded += '=' * (-len(encoded) % 4)

    try:
        image_bytes = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError(f"Invalid base64 image data: {e}") from e

    if not image_bytes:
        raise InvalidImageError("Image decoded to an empty payload")
    return image_bytes
