"""
Payload format conversion utilities.

Handles conversions between the transport formats callers use:
- Raw bytes
- Base64 encoded strings
- data: URLs (data:<media type>;base64,<payload>)
"""

import base64
import binascii
import logging
import re
from typing import Optional, Tuple

from domain_types import RawUpload

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(
    r"^data:(?P<media_type>[^;,]*)(?P<params>(;[^;,]*)*),(?P<payload>.*)$", re.S
)


def to_base64(data: bytes) -> str:
    """
    Convert bytes to a base64 string.

    Args:
        data: Raw payload

    Returns:
        Base64 encoded string
    """
    return base64.b64encode(data).decode("utf-8")


def from_base64(base64_string: str) -> bytes:
    """
    Convert a base64 string to bytes.

    Args:
        base64_string: Base64 encoded payload

    Returns:
        Decoded bytes

    Raises:
        ValueError: If the string is not valid base64
    """
    try:
        return base64.b64decode("".join(base64_string.split()), validate=True)
    except binascii.Error as e:
        logger.error(f"Failed to decode base64 payload: {e}")
        raise ValueError(f"Invalid base64 payload: {e}")


def to_data_url(data: bytes, media_type: str) -> str:
    """Wrap bytes in a base64 data URL."""
    return f"data:{media_type};base64,{to_base64(data)}"


def parse_data_url(data_url: str) -> Tuple[str, bytes]:
    """
    Split a base64 data URL into media type and payload bytes.

    Args:
        data_url: URL of the form data:<media type>;base64,<payload>

    Returns:
        Tuple of (media_type, payload bytes)

    Raises:
        ValueError: If the URL is malformed or not base64 encoded
    """
    match = DATA_URL_PATTERN.match(data_url.strip())
    if match is None:
        raise ValueError("Malformed data URL")

    params = [p.strip().lower() for p in match.group("params").split(";") if p.strip()]
    if "base64" not in params:
        raise ValueError("Only base64 data URLs are supported")

    media_type = match.group("media_type").strip().lower() or "text/plain"
    return media_type, from_base64(match.group("payload"))


def upload_from_data_url(data_url: str, filename: Optional[str] = None) -> RawUpload:
    """Build a RawUpload from a data URL, taking the declared media type from the URL."""
    media_type, data = parse_data_url(data_url)
    return RawUpload(data=data, media_type=media_type, filename=filename)


def upload_from_base64(
    base64_string: str, media_type: str, filename: Optional[str] = None
) -> RawUpload:
    """Build a RawUpload from a bare base64 payload and a declared media type."""
    return RawUpload(data=from_base64(base64_string), media_type=media_type, filename=filename)
