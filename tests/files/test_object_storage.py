from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

import pytest

from taskora.core.exceptions import ValidationError
from taskora.files.storage import LocalObjectStorage, build_object_name


@pytest.fixture()
def storage(tmp_path):
    return LocalObjectStorage(str(tmp_path), "k3y", default_ttl=60)


def test_object_name_is_namespaced_and_sanitized():
    name = build_object_name("user-1", "my report (final).pdf")
    assert re.fullmatch(r"user-1/[0-9a-f-]{36}_my_report__final_.pdf", name)


def test_upload_download_remove(storage):
    storage.upload("u1/a.txt", b"payload")
    assert storage.exists("u1/a.txt")
    assert storage.download("u1/a.txt") == b"payload"

    storage.remove(["u1/a.txt", "u1/missing.txt"])
    assert not storage.exists("u1/a.txt")


def test_paths_cannot_escape_the_root(storage):
    with pytest.raises(ValidationError):
        storage.upload("../outside.txt", b"x")


def test_signed_url_verifies_until_expiry(storage):
    url = storage.create_signed_url("u1/a.txt", 60, now=1_000_000)
    parsed = urlparse(url)
    query = {k: v[0] for k, v in parse_qs(parsed.query).items()}

    assert parsed.path == "/files/object/u1/a.txt"
    assert storage.verify_signed("u1/a.txt", query["expires"], query["signature"], now=1_000_030)
    assert not storage.verify_signed("u1/a.txt", query["expires"], query["signature"], now=1_000_061)
    assert not storage.verify_signed("u1/b.txt", query["expires"], query["signature"], now=1_000_030)
    assert not storage.verify_signed("u1/a.txt", "nope", query["signature"], now=1_000_030)


def test_signature_depends_on_secret(tmp_path):
    a = LocalObjectStorage(str(tmp_path), "one")
    b = LocalObjectStorage(str(tmp_path), "two")
    query = parse_qs(urlparse(a.create_signed_url("p.txt", 60, now=0)).query)
    assert not b.verify_signed("p.txt", query["expires"][0], query["signature"][0], now=1)
