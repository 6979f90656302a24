"""Tests for the buffered hashlib-style MD2 hasher and the one-shot helpers."""

from __future__ import annotations

import pytest

import md2

RFC_1319_VECTORS = [
    (b"", "8350e5a3e24c153df2275c9f80692773"),
    (b"a", "32ec01ec4a6dac72c0ab96fb34c0b5d1"),
    (b"abc", "da853b0d3f88d99b30283a69e6ded6bb"),
    (b"message digest", "ab4f496bfb2a530b219ff33031fe06b0"),
    (b"abcdefghijklmnopqrstuvwxyz", "4e8ddff3650292ab5a4108c3aa47940b"),
    (
        b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789",
        "da33def2a42df13975352846c30338cd",
    ),
    (b"1234567890" * 8, "d5976f79d83d3a0dc9806c3c66f3efd8"),
]

_MESSAGE = bytes((i * 31 + 17) & 0xFF for i in range(203))


@pytest.mark.parametrize("message, expected", RFC_1319_VECTORS)
def test_rfc_1319_vectors(message: bytes, expected: str) -> None:
    assert md2.Md2Hash(message).hex() == expected
    assert md2.new(message).hexdigest() == expected


def test_hello_world() -> None:
    hasher = md2.Md2()
    hasher.update(b"hello world")

    assert hasher.hexdigest() == "d9cce882ee690a5c1ce70beff3a78c77"


def test_hasher_attributes() -> None:
    hasher = md2.new()

    assert hasher.name == "Md2"
    assert hasher.block_size == 16
    assert hasher.digest_size == 16


def test_hashing_is_deterministic() -> None:
    assert md2.Md2Hash(_MESSAGE) == md2.Md2Hash(_MESSAGE)


@pytest.mark.parametrize("chunk", [1, 3, 15, 16, 17, 64])
def test_fixed_size_chunks_match_one_shot(chunk: int) -> None:
    hasher = md2.Md2()
    for i in range(0, len(_MESSAGE), chunk):
        hasher.update(_MESSAGE[i : i + chunk])

    assert hasher.digest() == md2.Md2Hash(_MESSAGE)


def test_every_two_way_split_matches_one_shot() -> None:
    expected = md2.Md2Hash(_MESSAGE[:70])
    for cut in range(71):
        hasher = md2.Md2(_MESSAGE[:cut])
        hasher.update(_MESSAGE[cut:70])
        assert hasher.digest() == expected, cut


def test_update_accepts_bytearray_and_memoryview() -> None:
    hasher = md2.Md2()
    hasher.update(bytearray(b"hello "))
    hasher.update(memoryview(b"world"))

    assert hasher.hexdigest() == "d9cce882ee690a5c1ce70beff3a78c77"


def test_digest_length_for_many_lengths() -> None:
    data = bytes(range(256)) * 12
    seen = set()
    for n in list(range(0, 70)) + [255, 256, 257, 1023, 1024, 1025, 3000, 3072]:
        digest = md2.Md2Hash(data[:n])
        assert len(digest) == 16
        seen.add(digest)

    assert len(seen) == 78


def test_digest_does_not_consume_state() -> None:
    hasher = md2.Md2(b"hello")
    first = hasher.digest()

    assert hasher.digest() == first

    hasher.update(b" world")
    assert hasher.hexdigest() == "d9cce882ee690a5c1ce70beff3a78c77"


def test_copy_forks_the_hasher() -> None:
    base = md2.Md2(b"hello")
    fork = base.copy()
    fork.update(b" world")

    assert base.digest() == md2.Md2Hash(b"hello")
    assert fork.digest() == md2.Md2Hash(b"hello world")


def test_reset_matches_fresh_instance() -> None:
    hasher = md2.Md2(_MESSAGE)
    hasher.digest()

    hasher.reset()
    hasher.update(b"abc")

    assert hasher.digest() == md2.Md2(b"abc").digest()
    assert hasher.hexdigest() == "da853b0d3f88d99b30283a69e6ded6bb"


@pytest.mark.parametrize("cut", [0, 1, 15, 16, 17, 100, 203])
def test_snapshot_resume(cut: int) -> None:
    head = md2.Md2(_MESSAGE[:cut])
    snapshot = head.serialize()

    resumed = md2.Md2.deserialize(snapshot)
    resumed.update(_MESSAGE[cut:])

    assert len(snapshot) == 81
    assert snapshot[64] == cut % 16
    assert resumed.digest() == md2.Md2Hash(_MESSAGE)


@pytest.mark.parametrize("size", [0, 64, 80, 82])
def test_hasher_deserialize_rejects_wrong_length(size: int) -> None:
    with pytest.raises(md2.DeserializationError):
        md2.Md2.deserialize(bytes(size))


def test_hasher_deserialize_rejects_bad_position() -> None:
    snapshot = bytearray(81)
    snapshot[64] = 16

    with pytest.raises(md2.DeserializationError):
        md2.Md2.deserialize(bytes(snapshot))


@pytest.mark.parametrize("bad", ["abc", 123, None, [1, 2, 3]])
def test_non_bytes_input_is_rejected(bad: object) -> None:
    with pytest.raises(TypeError):
        md2.Md2Hash(bad)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        md2.Md2().update(bad)  # type: ignore[arg-type]


def test_hash_file_reads_in_chunks(tmp_path) -> None:
    path = tmp_path / "blob.bin"
    data = bytes(range(256)) * 600
    path.write_bytes(data)

    assert md2.HashFile(str(path)) == md2.Md2Hash(data)
