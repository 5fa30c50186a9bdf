"""Tamper-detection checksum for licence keys.

The digest is a 31-multiplier rolling hash over ``secret + message`` held in a
signed 32-bit accumulator. It is rendered as upper-case hex and cut to eight
characters without zero padding, so short digests are valid and must be
compared as-is.
"""

MAX_DIGEST_LENGTH = 8

_UINT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def to_int32(value: int) -> int:
    """Wrap an integer to signed 32-bit two's-complement range."""
    value &= _UINT32_MASK
    if value & _INT32_SIGN:
        value -= _UINT32_MASK + 1
    return value


def compute_checksum(secret: str, message: str) -> str:
    """Compute the digest of ``message`` keyed by ``secret``.

    Args:
        secret: Shared secret prepended to the message.
        message: Text to digest, normally licence type + encoded payload.

    Returns:
        One to eight upper-case hexadecimal characters.
    """
    acc = 0
    for char in secret + message:
        acc = to_int32((acc << 5) - acc + ord(char))
    return format(abs(acc), "X")[:MAX_DIGEST_LENGTH]


class ChecksumEngine:
    """Compute and verify licence checksums with a fixed shared secret."""

    def __init__(self, secret: str):
        """Initialize with the shared secret.

        Args:
            secret: Secret mixed into every digest.
        """
        self._secret = secret

    def compute(self, message: str) -> str:
        return compute_checksum(self._secret, message)

    def verify(self, message: str, candidate) -> bool:
        """Check a digest with an exact, case-sensitive comparison."""
        if not isinstance(candidate, str):
            return False
        return self.compute(message) == candidate
