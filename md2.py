# =========================================================
#   MD2 : Legacy Message Digest (RFC 1319)
#   Version  : v0.1
#   Author   : JXPH
#   Purpose  : Reference Build (Interoperability only)
# =========================================================

from typing import List, Optional, Union
import sys, argparse

# =========================================================
#   GLOBAL PARAMETERS
# =========================================================

AlgorithmName = "Md2"
BlockSize = 16
OutputSize = 16
StateSize = 48
RoundCount = 18
SerializedStateSize = StateSize + BlockSize
_READ_CHUNK = 1 << 16

BytesLike = Union[bytes, bytearray, memoryview]


# =========================================================
#   SUBSTITUTION TABLE (digits of pi)
# =========================================================
S = bytes((
    41, 46, 67, 201, 162, 216, 124, 1, 61, 54, 84, 161, 236, 240, 6, 19,
    98, 167, 5, 243, 192, 199, 115, 140, 152, 147, 43, 217, 188, 76, 130, 202,
    30, 155, 87, 60, 253, 212, 224, 22, 103, 66, 111, 24, 138, 23, 229, 18,
    190, 78, 196, 214, 218, 158, 222, 73, 160, 251, 245, 142, 187, 47, 238, 122,
    169, 104, 121, 145, 21, 178, 7, 63, 148, 194, 16, 137, 11, 34, 95, 33,
    128, 127, 93, 154, 90, 144, 50, 39, 53, 62, 204, 231, 191, 247, 151, 3,
    255, 25, 48, 179, 72, 165, 181, 209, 215, 94, 146, 42, 172, 86, 170, 198,
    79, 184, 56, 210, 150, 164, 125, 182, 118, 252, 107, 226, 156, 116, 4, 241,
    69, 157, 112, 89, 100, 113, 135, 32, 134, 91, 207, 101, 230, 45, 168, 2,
    27, 96, 37, 173, 174, 176, 185, 246, 28, 70, 97, 105, 52, 64, 126, 15,
    85, 71, 163, 35, 221, 81, 175, 58, 195, 92, 249, 206, 186, 197, 234, 38,
    44, 83, 13, 110, 133, 40, 132, 9, 211, 223, 205, 244, 65, 129, 77, 82,
    106, 220, 55, 200, 108, 193, 171, 250, 36, 225, 123, 8, 12, 189, 177, 74,
    120, 136, 149, 139, 227, 99, 232, 109, 233, 203, 213, 254, 59, 0, 29, 57,
    242, 239, 183, 14, 102, 88, 208, 228, 166, 119, 114, 248, 235, 117, 75, 10,
    49, 68, 80, 180, 143, 237, 31, 26, 219, 153, 141, 51, 159, 17, 131, 20,
))


class DeserializationError(ValueError):
    """Raised when a serialized state snapshot is malformed."""


# =========================================================
#   HASH CORE
# =========================================================
class Md2Core:
    """
    Block-level MD2 state: a 48-byte working buffer and a 16-byte checksum.

    The core only ever sees whole 16-byte blocks through ``compress``; the
    trailing partial block is handed to ``finalize``, which pads it and folds
    the checksum in. After ``finalize`` the state is spent and must be
    ``reset`` before reuse. Finalizing twice is not detected.
    """

    name = AlgorithmName
    block_size = BlockSize
    digest_size = OutputSize

    def __init__(self):
        self.x = bytearray(StateSize)
        self.checksum = bytearray(BlockSize)

    def __repr__(self) -> str:
        return "<Md2Core ...>"

    def compress(self, block: BytesLike) -> None:
        if len(block) != BlockSize:
            raise ValueError(f"MD2 block must be {BlockSize} bytes, got {len(block)}")
        x = self.x
        for j in range(16):
            x[16 + j] = block[j]
            x[32 + j] = block[j] ^ x[j]

        t = 0
        for j in range(RoundCount):
            for k in range(StateSize):
                t = x[k] ^ S[t]
                x[k] = t
            t = (t + j) & 0xFF

        c = self.checksum
        l = c[15]
        for j in range(16):
            l = c[j] ^ S[block[j] ^ l]
            c[j] = l

    def finalize(self, remaining: BytesLike = b"") -> bytes:
        pos = len(remaining)
        if pos >= BlockSize:
            raise ValueError(f"final input must be shorter than {BlockSize} bytes, got {pos}")
        rem = BlockSize - pos
        self.compress(bytes(remaining) + bytes([rem]) * rem)
        self.compress(bytes(self.checksum))
        return bytes(self.x[:OutputSize])

    def reset(self) -> None:
        self.x = bytearray(StateSize)
        self.checksum = bytearray(BlockSize)

    def copy(self) -> "Md2Core":
        other = Md2Core()
        other.x[:] = self.x
        other.checksum[:] = self.checksum
        return other

    def serialize(self) -> bytes:
        # layout: working buffer || checksum
        return bytes(self.x) + bytes(self.checksum)

    @classmethod
    def deserialize(cls, snapshot: BytesLike) -> "Md2Core":
        if len(snapshot) != SerializedStateSize:
            raise DeserializationError(
                f"MD2 core state must be {SerializedStateSize} bytes, got {len(snapshot)}"
            )
        core = cls()
        core.x[:] = snapshot[:StateSize]
        core.checksum[:] = snapshot[StateSize:]
        return core


# =========================================================
#   BUFFERED HASHER (hashlib-style)
# =========================================================
class Md2:
    """Incremental MD2 hasher with the usual ``update``/``digest`` interface."""

    name = AlgorithmName
    block_size = BlockSize
    digest_size = OutputSize

    def __init__(self, data: BytesLike = b""):
        self._core = Md2Core()
        self._pending = bytearray()
        if data:
            self.update(data)

    def __repr__(self) -> str:
        return "<Md2 ...>"

    def update(self, data: BytesLike) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Md2.update expects bytes-like data, got {type(data).__name__}")
        self._pending += data
        full = len(self._pending) - len(self._pending) % BlockSize
        for i in range(0, full, BlockSize):
            self._core.compress(self._pending[i:i + BlockSize])
        del self._pending[:full]

    def digest(self) -> bytes:
        return self._core.copy().finalize(self._pending)

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self) -> "Md2":
        other = Md2()
        other._core = self._core.copy()
        other._pending[:] = self._pending
        return other

    def reset(self) -> None:
        self._core.reset()
        self._pending.clear()

    def serialize(self) -> bytes:
        pos = len(self._pending)
        return self._core.serialize() + bytes([pos]) + bytes(self._pending) + bytes(BlockSize - pos)

    @classmethod
    def deserialize(cls, snapshot: BytesLike) -> "Md2":
        expected = SerializedStateSize + 1 + BlockSize
        if len(snapshot) != expected:
            raise DeserializationError(f"MD2 hasher state must be {expected} bytes, got {len(snapshot)}")
        pos = snapshot[SerializedStateSize]
        if pos >= BlockSize:
            raise DeserializationError(f"MD2 buffer position out of range: {pos}")
        hasher = cls()
        hasher._core = Md2Core.deserialize(snapshot[:SerializedStateSize])
        start = SerializedStateSize + 1
        hasher._pending[:] = snapshot[start:start + pos]
        return hasher


def new(data: BytesLike = b"") -> Md2:
    return Md2(data)


# =========================================================
#   TOP-LEVEL HASH
# =========================================================
def Md2Hash(message: bytes) -> bytes:
    if not isinstance(message, (bytes, bytearray)):
        raise TypeError("Md2Hash expects bytes")
    return Md2(message).digest()


def HashFile(path: str) -> bytes:
    h = Md2()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_READ_CHUNK), b""):
            h.update(chunk)
    return h.digest()


# =========================================================
#   SELF-TEST & CLI
# =========================================================
_SELFTEST_VECTORS = [
    (b"", "8350e5a3e24c153df2275c9f80692773"),
    (b"abc", "da853b0d3f88d99b30283a69e6ded6bb"),
    (b"hello world", "d9cce882ee690a5c1ce70beff3a78c77"),
]


def run_selftest() -> bool:
    print("Running MD2 v0.1 self-test...")
    ok = True

    for msg, expected in _SELFTEST_VECTORS:
        got = Md2Hash(msg).hex()
        if got != expected:
            print(f"FAIL: KAT {msg!r} -> {got}, expected {expected}")
            ok = False
    if ok:
        print("PASS: Known answers")

    msg = b"selftest" * 9
    d1 = Md2Hash(msg)
    if d1 != Md2Hash(msg):
        print("FAIL: Non-deterministic output")
        ok = False
    else:
        print("PASS: Deterministic")

    h = Md2()
    for i in range(0, len(msg), 5):
        h.update(msg[i:i + 5])
    if h.digest() != d1:
        print("FAIL: Chunked input disagrees with one-shot")
        ok = False
    else:
        print("PASS: Incremental")

    half = Md2(msg[:37])
    resumed = Md2.deserialize(half.serialize())
    resumed.update(msg[37:])
    if resumed.digest() != d1:
        print("FAIL: Resumed snapshot disagrees with one-shot")
        ok = False
    else:
        print("PASS: Snapshot resume")

    return ok


def Main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="MD2 v0.1 (legacy interoperability only)")
    parser.add_argument("-m", "--message", type=str, help="Message to hash")
    parser.add_argument("-f", "--file", type=str, help="File path to hash")
    parser.add_argument("--selftest", action="store_true")
    args = parser.parse_args(argv)

    if args.selftest:
        return 0 if run_selftest() else 1

    if args.file:
        try:
            digest = HashFile(args.file)
        except OSError as e:
            parser.error(f"cannot read {args.file}: {e.strerror}")
    elif args.message is not None:
        digest = Md2Hash(args.message.encode())
    else:
        digest = Md2Hash(sys.stdin.buffer.read() or b"")

    print(digest.hex())
    return 0


if __name__ == "__main__":
    sys.exit(Main())
