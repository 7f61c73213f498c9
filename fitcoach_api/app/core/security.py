"""
Security helpers for password hashing and bearer authentication.

Tokens are JSON Web Tokens signed with HMAC‑SHA256 and base64url
encoded.  They embed the caller's claims (``userId``, ``email``,
``role``, ``name``) and an expiration timestamp (``exp``).  There is no
revocation list: a token stays valid until it expires, and refreshing
simply issues a new token from the same claims.

Passwords are hashed with PBKDF2‑HMAC‑SHA256 and a random salt.

The :func:`get_current_user` dependency implements the authentication
gate for protected routes: a missing credential is rejected with 401,
a malformed, tampered or expired one with 403.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings, settings as default_settings
from .errors import InvalidTokenError, MissingTokenError, PermissionDenied

PBKDF2_ITERATIONS = 100_000


@dataclass(frozen=True)
class Principal:
    """Identity attached to an authenticated request."""

    user_id: str
    email: str
    role: str
    name: str
    exp: int = 0

    def claims(self) -> Dict[str, str]:
        return {"userId": self.user_id, "email": self.email, "role": self.role, "name": self.name}


def _b64_url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64_url_decode(data: str) -> bytes:
    # Tokens travel without "=" padding.
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    data: Dict[str, Any],
    secret_key: Optional[str] = None,
    expires_delta: Optional[int] = None,
) -> str:
    """Sign ``data`` as an HS256 JWT.

    The payload is extended with an ``exp`` field holding the
    expiration time as a UNIX timestamp.  Clients must send the token
    in the ``Authorization`` header as ``Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed in the token.
    secret_key : Optional[str]
        Signing secret.  Defaults to the module level settings.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.token_lifetime_seconds``.

    Returns
    -------
    str
        A token of the form ``header.payload.signature``.
    """
    secret = secret_key or default_settings.secret_key
    to_encode = dict(data)
    exp_seconds = expires_delta if expires_delta is not None else default_settings.token_lifetime_seconds
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret_key: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Return the claims of ``token`` if it is authentic and unexpired, else ``None``."""
    secret = secret_key or default_settings.secret_key
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(_sign(signing_input, secret), actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        if not isinstance(data, dict) or data.get("exp") is None:
            return None
        # A signed but non-numeric "exp" is as unusable as a bad signature.
        if int(data["exp"]) < int(time.time()):
            return None
    except (ValueError, TypeError, UnicodeDecodeError):
        return None
    return data


def issue_token(principal_claims: Dict[str, str], app_settings: Settings) -> str:
    """Sign ``principal_claims`` with the application's secret and lifetime."""
    return create_access_token(
        principal_claims,
        secret_key=app_settings.secret_key,
        expires_delta=app_settings.token_lifetime_seconds,
    )


security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Principal:
    """Dependency that resolves the authenticated caller.

    Raises ``MissingTokenError`` (401) when no bearer credential is
    present and ``InvalidTokenError`` (403) when it cannot be verified.
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()
    app_settings: Settings = request.app.state.settings
    payload = decode_access_token(credentials.credentials, app_settings.secret_key)
    if not payload:
        raise InvalidTokenError()
    try:
        return Principal(
            user_id=str(payload["userId"]),
            email=str(payload["email"]),
            role=str(payload["role"]),
            name=str(payload.get("name", "")),
            exp=int(payload["exp"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidTokenError() from exc


def require_roles(*roles: str) -> Callable[..., Principal]:
    """Dependency factory allowing only callers whose role is in ``roles``.

    Use in routes via ``Depends(require_roles("coach", "admin"))``.
    """
    allowed = {role.lower() for role in roles}

    def _role_dependency(current_user: Principal = Depends(get_current_user)) -> Principal:
        if current_user.role.lower() not in allowed:
            raise PermissionDenied()
        return current_user

    return _role_dependency


def hash_password(password: str) -> str:
    """Return ``"<salt hex>$<PBKDF2-SHA256 key hex>"`` with a fresh 16 byte salt."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored ``salt$hash`` string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
