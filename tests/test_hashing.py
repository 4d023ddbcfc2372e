import pytest

from gitbase.expression import GetField, Literal
from gitbase.hashing import (
    blob_hash,
    compute_key,
    crc64_iso,
    expr_to_string,
    filename_hash,
    language_cache_size,
    language_hash,
)


def test_language_cache_size_default(monkeypatch):
    monkeypatch.delenv("GITBASE_LANGUAGE_CACHE_SIZE", raising=False)
    assert language_cache_size() == 10000


@pytest.mark.parametrize("value", ["", "abc", "0", "-3", " 5"])
def test_language_cache_size_invalid(monkeypatch, value):
    monkeypatch.setenv("GITBASE_LANGUAGE_CACHE_SIZE", value)
    assert language_cache_size() == 10000


def test_language_cache_size_from_env(monkeypatch):
    monkeypatch.setenv("GITBASE_LANGUAGE_CACHE_SIZE", "42")
    assert language_cache_size() == 42


def test_crc32_check_value():
    assert filename_hash("123456789") == 0xCBF43926


def test_crc64_iso_check_value():
    assert crc64_iso(b"123456789") == 0xB90956C775A41001


def test_blob_hash_empty_is_zero():
    assert blob_hash(b"") == 0
    assert blob_hash(b"123456789") == filename_hash("123456789")


def test_language_hash_halves():
    key = language_hash("foo.py", b"print('x')")
    assert key >> 32 == filename_hash("foo.py")
    assert key & 0xFFFFFFFF == blob_hash(b"print('x')")
    assert language_hash("foo.py", b"") >> 32 == filename_hash("foo.py")
    assert language_hash("foo.py", b"") & 0xFFFFFFFF == 0


def test_compute_key_is_hash_of_concatenation():
    assert compute_key("semantic", "python", b"code") == crc64_iso(
        b"semanticpythoncode"
    )
    assert compute_key(b"semantic", b"python", b"code") == compute_key(
        "semantic", "python", b"code"
    )
    assert compute_key("semantic", "python", b"a") != compute_key(
        "semantic", "python", b"b"
    )


def test_expr_to_string():
    assert expr_to_string(None, None) == ""
    assert expr_to_string(Literal(None), None) == ""
    assert expr_to_string(Literal("Python"), None) == "Python"
    assert expr_to_string(GetField(1, "x"), ["a", "b"]) == "b"
    assert expr_to_string(GetField(0, "x"), [7]) == "7"


def test_expr_to_string_invalid_type():
    with pytest.raises(TypeError):
        expr_to_string(Literal(object()), None)