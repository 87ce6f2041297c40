"""Storage key derivation and credential comparison helpers."""

from __future__ import annotations

import hashlib
import hmac
import secrets

SECRETS_NAMESPACE = "secrets"
SETTINGS_NAMESPACE = "settings"

SECRET_BYTES = 48


def derive(pepper: str, identity: str, *, algorithm: str = "sha1") -> str:
    """Return the hex digest of ``pepper + identity``.

    SHA-1 keeps keys compatible with records already in the store; any
    ``hashlib`` algorithm of at least 160 bits may be substituted.
    """
    digest = hashlib.new(algorithm)
    if digest.digest_size < 20:
        raise ValueError(f"Digest {algorithm!r} is shorter than 160 bits.")
    digest.update((pepper + identity).encode("utf-8"))
    return digest.hexdigest()


def storage_key(namespace: str, pepper: str, identity: str) -> str:
    """Build the full store key, e.g. ``settings:<hex>``."""
    return f"{namespace}:{derive(pepper, identity)}"


def secure_compare(a: str, b: str) -> bool:
    """Compare two strings in constant time."""
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def generate_secret() -> str:
    """Mint a new opaque user secret (48 random bytes, hex-encoded)."""
    return secrets.token_hex(SECRET_BYTES)


__all__ = [
    "SECRETS_NAMESPACE",
    "SETTINGS_NAMESPACE",
    "derive",
    "generate_secret",
    "secure_compare",
    "storage_key",
]
