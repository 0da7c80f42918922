"""Password hashing and opaque secret generation."""

from __future__ import annotations

import secrets

from werkzeug.security import check_password_hash, generate_password_hash

#: Minimum entropy (in bytes) for refresh-token secrets.
REFRESH_SECRET_BYTES = 64


def hash_password(plaintext: str) -> str:
    """
    Hash ``plaintext`` into a salted, self-describing digest.

    The digest embeds the method and its cost parameters
    (``scrypt:32768:8:1$<salt>$<hash>``), so verification keeps working after
    the default work factor changes.

    :param plaintext: Raw password.
    :type plaintext: str
    :returns: Digest safe to persist.
    :rtype: str
    :raises ValueError: If ``plaintext`` is empty or not a string.
    """
    if not isinstance(plaintext, str) or not plaintext:
        raise ValueError("Password must be a non-empty string.")
    return generate_password_hash(plaintext)


def verify_password(plaintext: str, digest: str | None) -> bool:
    """
    Check ``plaintext`` against ``digest`` in constant time.

    A missing or malformed digest yields ``False``; this function never raises
    for bad stored data.

    :param plaintext: Candidate password.
    :param digest: Stored digest produced by :func:`hash_password`.
    :returns: ``True`` only when the password matches.
    :rtype: bool
    """
    if not digest or not isinstance(plaintext, str):
        return False
    try:
        return bool(check_password_hash(digest, plaintext))
    except (ValueError, TypeError):
        return False


def generate_opaque_secret(nbytes: int = REFRESH_SECRET_BYTES) -> str:
    """
    Return ``nbytes`` of CSPRNG output encoded as URL-safe text.

    :param nbytes: Entropy in bytes; values below 64 are raised to 64.
    :returns: Random token string (about 1.3 characters per byte).
    :rtype: str
    """
    return secrets.token_urlsafe(max(nbytes, REFRESH_SECRET_BYTES))
