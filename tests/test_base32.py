"""Tests for core.base32."""

import pytest

from core.base32 import decode_secret, encode_secret, normalize_secret

HELLO_SECRET = "JBSWY3DPEHPK3PXP"
HELLO_BYTES = b"Hello!\xde\xad\xbe\xef"


def test_decode_known_secret() -> None:
    assert decode_secret(HELLO_SECRET) == HELLO_BYTES


@pytest.mark.parametrize(
    "variant",
    [
        "jbswy3dpehpk3pxp",
        "JBSW Y3DP EHPK 3PXP",
        " jbsw y3dp\tehpk 3pxp\n",
        "JBSWY3DPEHPK3PXP!!!",
        "JBSW-Y3DP-EHPK-3PXP",
    ],
)
def test_decode_ignores_case_spaces_and_junk(variant: str) -> None:
    assert decode_secret(variant) == HELLO_BYTES


@pytest.mark.parametrize("secret", ["", None, "!!!", "0189", "===="])
def test_decode_never_raises(secret) -> None:
    assert decode_secret(secret) == b""


def test_decode_drops_leftover_bits() -> None:
    # 5 chars = 25 bits -> 3 whole bytes, 1 bit discarded
    assert decode_secret("MZXW6") == b"foo"
    # 7 chars = 35 bits -> 4 bytes
    assert decode_secret("MZXW6YQ") == b"foob"


def test_decode_accepts_padding() -> None:
    assert decode_secret("MZXW6===") == b"foo"


def test_decode_single_char_is_empty() -> None:
    assert decode_secret("A") == b""


def test_encode_rfc_secret() -> None:
    assert encode_secret(b"12345678901234567890") == "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


def test_encode_strips_padding() -> None:
    assert encode_secret(b"foo") == "MZXW6"


def test_encode_decode_roundtrip() -> None:
    raw = bytes(range(37))
    assert decode_secret(encode_secret(raw)) == raw


def test_normalize_secret() -> None:
    assert normalize_secret("jbsw-y3dp ==") == "JBSWY3DP"
    assert normalize_secret(None) == ""
