"""Password hashing and verification.

Credentials are stored as a single string::

    sha256$<iterations>$<salt-hex>$<derived-key-hex>

derived with PBKDF2-HMAC. The iteration count and key length travel with
each credential, so raising ``HASH_ITERATIONS`` later never breaks existing
records. The KDF is fed the salt's hex text (not its raw bytes), which keeps
existing stored credentials verifiable.

``verify_password`` never raises: any malformed, unsupported or mismatching
input is simply ``False``.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import secrets
from dataclasses import dataclass

logger = logging.getLogger(__name__)

HASH_ALGORITHM = "sha256"
HASH_DELIMITER = "$"
HASH_ITERATIONS = 310_000
HASH_KEY_LENGTH = 64  # bytes
SALT_BYTES = 16

SUPPORTED_ALGORITHMS = frozenset({HASH_ALGORITHM})

# Upper bounds on values read back from storage; anything larger is
# treated as hostile rather than spent CPU on.
MAX_ITERATIONS = 10_000_000
MAX_KEY_LENGTH = 1024

# Either case decodes; the salt text is fed to the KDF exactly as stored.
_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})+")


@dataclass(frozen=True)
class Credential:
    """Parsed form of a stored credential string."""

    algorithm: str
    iterations: int
    salt_hex: str
    derived_key: bytes

    @property
    def salt(self) -> bytes:
        return bytes.fromhex(self.salt_hex)

    def serialize(self) -> str:
        return HASH_DELIMITER.join(
            [self.algorithm, str(self.iterations), self.salt_hex, self.derived_key.hex()]
        )


def _derive(password: str, salt_hex: str, iterations: int, key_length: int, algorithm: str) -> bytes:
    return hashlib.pbkdf2_hmac(
        algorithm,
        password.encode("utf-8"),
        salt_hex.encode("ascii"),
        iterations,
        dklen=key_length,
    )


def hash_password(password: str, iterations: int = HASH_ITERATIONS) -> str:
    """Derive a new credential string with a fresh random salt."""
    if not isinstance(password, str):
        raise TypeError("password must be a string")
    if iterations <= 0:
        raise ValueError("iterations must be positive")
    salt_hex = secrets.token_bytes(SALT_BYTES).hex()
    key = _derive(password, salt_hex, iterations, HASH_KEY_LENGTH, HASH_ALGORITHM)
    return Credential(HASH_ALGORITHM, iterations, salt_hex, key).serialize()


def parse_credential(stored: object) -> Credential | None:
    """Split a stored credential into its four fields, or ``None`` if invalid."""
    if not isinstance(stored, str):
        return None
    parts = stored.split(HASH_DELIMITER)
    if len(parts) != 4:
        return None

    algorithm, iteration_text, salt_hex, key_hex = parts
    if algorithm not in SUPPORTED_ALGORITHMS:
        return None
    if not (iteration_text.isascii() and iteration_text.isdigit()):
        return None
    iterations = int(iteration_text)
    if iterations <= 0 or iterations > MAX_ITERATIONS:
        return None
    if not _HEX_RE.fullmatch(salt_hex) or not _HEX_RE.fullmatch(key_hex):
        return None
    key = bytes.fromhex(key_hex)
    if len(key) > MAX_KEY_LENGTH:
        return None
    return Credential(algorithm, iterations, salt_hex, key)


def verify_password(password: str, stored: str) -> bool:
    """Check *password* against a stored credential in constant time."""
    if not isinstance(password, str):
        return False
    credential = parse_credential(stored)
    if credential is None:
        logger.debug("Rejected malformed or unsupported credential")
        return False

    try:
        derived = _derive(
            password,
            credential.salt_hex,
            credential.iterations,
            len(credential.derived_key),
            credential.algorithm,
        )
    except (UnicodeEncodeError, ValueError, OverflowError):
        return False

    if len(derived) != len(credential.derived_key):
        return False
    return hmac.compare_digest(derived, credential.derived_key)


def needs_rehash(stored: str, iterations: int = HASH_ITERATIONS) -> bool:
    """True if a valid credential is weaker than the current parameters."""
    credential = parse_credential(stored)
    if credential is None:
        return False
    return (
        credential.algorithm != HASH_ALGORITHM
        or credential.iterations < iterations
        or len(credential.derived_key) != HASH_KEY_LENGTH
    )
