from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

PBKDF2_ALGORITHM = "pbkdf2_sha256"
PBKDF2_ITERATIONS = 260_000
PASSWORD_SALT_SIZE = 16
TOKEN_VERSION = "s1"


@dataclass(frozen=True, slots=True)
class AdminSessionClaims:
    admin_id: int
    expires_at: datetime


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64url_decode(raw: str) -> bytes:
    padded = raw + ("=" * (-len(raw) % 4))
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty.")

    salt = secrets.token_bytes(PASSWORD_SALT_SIZE)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        PBKDF2_ITERATIONS,
    )
    return (
        f"{PBKDF2_ALGORITHM}$"
        f"{PBKDF2_ITERATIONS}$"
        f"{_b64url_encode(salt)}$"
        f"{_b64url_encode(digest)}"
    )


def verify_password(password: str, stored_hash: str) -> bool:
    try:
        algorithm, raw_iterations, raw_salt, raw_digest = stored_hash.split("$", 3)
    except ValueError:
        return False

    if algorithm != PBKDF2_ALGORITHM:
        return False

    try:
        iterations = int(raw_iterations)
        salt = _b64url_decode(raw_salt)
        expected_digest = _b64url_decode(raw_digest)
    except (ValueError, TypeError):
        return False

    candidate_digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        iterations,
    )
    return hmac.compare_digest(candidate_digest, expected_digest)


def generate_password(length: int = 16) -> str:
    return secrets.token_urlsafe(length)[:length]


def _sign(message: str, secret: str) -> bytes:
    digest = hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return _b64url_encode(digest).encode("ascii")


def create_admin_session_token(
    *,
    admin_id: int,
    secret: str,
    ttl_minutes: int,
) -> tuple[str, datetime]:
    """Issue ``<version>.<admin id>.<expiry>.<signature>`` for the session cookie."""
    expires_at = datetime.now(UTC) + timedelta(minutes=ttl_minutes)
    message = f"{TOKEN_VERSION}.{admin_id}.{int(expires_at.timestamp())}"
    signature = _sign(message, secret).decode("ascii")
    return f"{message}.{signature}", expires_at


def decode_admin_session_token(token: str, secret: str) -> AdminSessionClaims:
    message, _, signature = token.rpartition(".")
    if not message or not signature:
        raise ValueError("Malformed token")

    if not hmac.compare_digest(_sign(message, secret), signature.encode("utf-8")):
        raise ValueError("Invalid token signature")

    try:
        version, raw_admin_id, raw_expiry = message.split(".")
        admin_id = int(raw_admin_id)
        expires_at = datetime.fromtimestamp(int(raw_expiry), UTC)
    except (ValueError, OverflowError, OSError) as exc:
        raise ValueError("Malformed token payload") from exc

    if version != TOKEN_VERSION:
        raise ValueError("Unsupported token version")
    if expires_at <= datetime.now(UTC):
        raise ValueError("Token expired")

    return AdminSessionClaims(admin_id=admin_id, expires_at=expires_at)
