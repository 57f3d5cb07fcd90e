"""
Request id helpers.
"""
import secrets
import time

CROCKFORD = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"


def _encode(num: int, length: int) -> str:
    chars = []
    for _ in range(length):
        num, rem = divmod(num, 32)
        chars.append(CROCKFORD[rem])
    return "".join(reversed(chars))


def new_request_id() -> str:
    """ULID-shaped id: 48-bit millisecond timestamp + 80 random bits."""
    millis = time.time_ns() // 1_000_000
    return _encode(millis, 10) + _encode(secrets.randbits(80), 16)


def request_id(header_value: str | None = None) -> str:
    """Reuse an incoming X-Request-ID when present, otherwise mint one."""
    if header_value and header_value.strip():
        return header_value.strip()
    return new_request_id()
