import pytest

from remotecache.http_cache import (
    EntryKind,
    RequestURLError,
    blob_path,
    client_address,
    parse_request_url,
)

A_SHA256SUM = "fec3be77b8aa0d307ed840581ded3d114c86f36d4914c81e33a72877020c0603"


def test_rejects_invalid_url():
    with pytest.raises(RequestURLError):
        parse_request_url("invalid/url", True)


def test_error_message_is_html_escaped():
    with pytest.raises(RequestURLError) as info:
        parse_request_url("<b>", True)
    assert "&lt;b&gt;" in str(info.value)
    assert "<b>" not in str(info.value)


def test_cas_url():
    kind, hash_value, instance = parse_request_url("cas/" + A_SHA256SUM, True)
    assert hash_value == A_SHA256SUM
    assert kind is EntryKind.CAS
    assert instance == ""


def test_ac_url():
    kind, hash_value, instance = parse_request_url("ac/" + A_SHA256SUM, True)
    assert hash_value == A_SHA256SUM
    assert kind is EntryKind.AC
    assert instance == ""


def test_ac_url_with_prefix():
    kind, hash_value, instance = parse_request_url("prefix/ac/" + A_SHA256SUM, True)
    assert hash_value == A_SHA256SUM
    assert kind is EntryKind.AC
    assert instance == "prefix"


def test_ac_url_without_validation_is_raw():
    kind, hash_value, instance = parse_request_url("prefix/ac/" + A_SHA256SUM, False)
    assert hash_value == A_SHA256SUM
    assert kind is EntryKind.RAW
    assert instance == "prefix"


def test_prefix_with_slashes():
    parsed = parse_request_url("prefix/with/slashes/ac/" + A_SHA256SUM, False)
    assert parsed.hash == A_SHA256SUM
    assert parsed.kind is EntryKind.RAW
    assert parsed.instance == "prefix/with/slashes"


def test_leading_slash_allowed():
    parsed = parse_request_url("/cas/" + A_SHA256SUM, True)
    assert parsed.kind is EntryKind.CAS
    assert parsed.instance == ""


@pytest.mark.parametrize(
    "url",
    [
        "cas/" + A_SHA256SUM.upper(),
        "cas/" + A_SHA256SUM[:-1],
        "cas/" + A_SHA256SUM + "\n",
        "foo/" + A_SHA256SUM,
    ],
)
def test_rejects_malformed_hashes(url):
    with pytest.raises(RequestURLError):
        parse_request_url(url, True)


def test_blob_path():
    assert blob_path(EntryKind.CAS, A_SHA256SUM) == "/cas/" + A_SHA256SUM
    assert blob_path(EntryKind.AC, A_SHA256SUM) == "/ac/" + A_SHA256SUM


@pytest.mark.parametrize(
    "remote, expected",
    [
        ("127.0.0.1:1234", "127.0.0.1"),
        ("[::1]:80", "::1"),
        ("bufconn", "bufconn"),
        ("a:b:c", "a:b:c"),
    ],
)
def test_client_address(remote, expected):
    assert client_address(remote) == expected