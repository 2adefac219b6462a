import base64
import json
import zlib

import pytest

from computations import InvalidArgument
from share_link import (
    build_share_url,
    compress_to_encoded_uri_component,
    decompress_from_encoded_uri_component,
    load_shared_group,
)


def test_payload_is_url_safe_zlib():
    data = compress_to_encoded_uri_component("halo " * 50)
    assert "=" not in data and "+" not in data and "/" not in data
    raw = base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
    assert zlib.decompress(raw) == ("halo " * 50).encode("utf-8")
    assert decompress_from_encoded_uri_component(data) == "halo " * 50


def test_share_url_opens_to_same_group(group):
    url = build_share_url(group, "https://split.example/")
    assert url.startswith("https://split.example/shared?data=")
    assert load_shared_group(url.split("data=", 1)[1]) == group


def test_missing_data_is_invalid():
    with pytest.raises(InvalidArgument):
        load_shared_group("")


def test_corrupt_data_is_invalid():
    with pytest.raises(InvalidArgument):
        load_shared_group("not-a-real-payload")


def test_group_without_name_is_invalid():
    data = compress_to_encoded_uri_component(json.dumps({"id": "g1", "people": []}))
    with pytest.raises(InvalidArgument):
        load_shared_group(data)
