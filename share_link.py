"""
Compressed share-link payloads for SplitBill groups
"""
from __future__ import annotations
import base64
import binascii
import json
import logging
import zlib

from computations import InvalidArgument
from config import dict_to_group, group_to_dict
from models import Group

logger = logging.getLogger(__name__)


def base64_url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def base64_url_decode(s: str) -> bytes:
    pad = len(s) % 4
    if pad:
        s += "=" * (4 - pad)
    return base64.urlsafe_b64decode(s.encode("ascii"))


def compress_to_encoded_uri_component(text: str) -> str:
    """Deflate (zlib container, level 9) then URL-safe base64 without padding"""
    return base64_url_encode(zlib.compress(text.encode("utf-8"), 9))


def decompress_from_encoded_uri_component(data: str) -> str:
    return zlib.decompress(base64_url_decode(data)).decode("utf-8")


def build_share_url(group: Group, base_url: str) -> str:
    payload = json.dumps(group_to_dict(group), ensure_ascii=False, separators=(",", ":"))
    return f"{base_url.rstrip('/')}/shared?data={compress_to_encoded_uri_component(payload)}"


def load_shared_group(data: str) -> Group:
    """Decode a share payload back into a Group"""
    if not data:
        raise InvalidArgument("share link carries no data")
    try:
        d = json.loads(decompress_from_encoded_uri_component(data))
    except (ValueError, zlib.error, binascii.Error) as exc:
        logger.warning("could not decode shared group: %s", exc)
        raise InvalidArgument("share link is corrupt or invalid") from exc

    if not isinstance(d, dict) or not d.get("id") or not d.get("name"):
        raise InvalidArgument("shared group data is missing id or name")
    try:
        return dict_to_group(d)
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidArgument(f"shared group data is malformed: {exc}") from exc
