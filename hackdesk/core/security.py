"""Security and authentication utilities."""
import hmac
import secrets
import argon2
from fastapi import HTTPException, Request

from hackdesk.core import config
from hackdesk.core.constants import QR_TOKEN_BYTES

# Argon2 hasher for the admin secret
ph = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,
    parallelism=1,
    hash_len=32,
    salt_len=16
)


def hash_secret(secret: str) -> str:
    """Hash a secret using Argon2."""
    return ph.hash(secret)


def verify_secret(secret: str, secret_hash: str) -> bool:
    """Verify a secret against its Argon2 hash."""
    try:
        ph.verify(secret_hash, secret)
        return True
    except (argon2.exceptions.VerificationError, argon2.exceptions.InvalidHashError):
        return False


def generate_qr_token() -> str:
    """Generate a badge token for an accepted applicant."""
    return secrets.token_hex(QR_TOKEN_BYTES)


def verify_admin_secret(candidate: str) -> bool:
    """Check a presented bearer token against ADMIN_API_SECRET.

    Supports both hashed secrets (starting with $argon2) and plaintext.
    Plaintext is compared in constant time.

    To hash a secret for production, run:
        python hash_secret.py 'your-secret'
    """
    stored_secret = config.settings.ADMIN_API_SECRET or ""

    if stored_secret.startswith("$argon2"):
        return verify_secret(candidate, stored_secret)
    return hmac.compare_digest(candidate.encode(), stored_secret.encode())


def verify_admin_token(request: Request) -> str:
    """Verify the Authorization bearer token and return it."""
    if not config.settings.ADMIN_API_SECRET:
        raise HTTPException(status_code=500, detail="Admin secret not configured")

    header = request.headers.get("Authorization")
    if not header or not header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = header[len("Bearer "):]
    if not verify_admin_secret(token):
        raise HTTPException(status_code=403, detail="Forbidden")
    return token
