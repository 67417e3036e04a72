from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from marketplace.errors import UnauthorizedError

DEFAULT_JWT_SECRET = "dev-secret-change-me"


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, value)


def redact_sensitive(value: object) -> object:
    sensitive_keys = {"authorization", "token", "secret", "password", "confirmpassword", "clientsecret"}
    if isinstance(value, dict):
        redacted: dict[str, object] = {}
        for key, item in value.items():
            key_lower = str(key).lower()
            if key_lower in sensitive_keys:
                redacted[str(key)] = "***REDACTED***"
            else:
                redacted[str(key)] = redact_sensitive(item)
        return redacted
    if isinstance(value, list):
        return [redact_sensitive(x) for x in value]
    if isinstance(value, str):
        if len(value) >= 24 and any(k in value.lower() for k in ("sk_", "bearer ", "pi_")):
            return "***REDACTED***"
    return value


@dataclass
class AuthPrincipal:
    id: str
    email: str
    role: str

    def as_claims(self) -> dict[str, Any]:
        return {"id": self.id, "email": self.email, "role": self.role}


@dataclass
class JwtAuthConfig:
    secret: str
    algorithm: str
    ttl: timedelta

    @classmethod
    def from_env(cls) -> "JwtAuthConfig":
        return cls(
            secret=os.environ.get("JWT_SECRET", "").strip() or DEFAULT_JWT_SECRET,
            algorithm="HS256",
            ttl=timedelta(days=_env_int("JWT_TTL_DAYS", 7)),
        )


def issue_token(principal: AuthPrincipal, *, cfg: JwtAuthConfig) -> str:
    now = datetime.now(UTC)
    payload = {
        **principal.as_claims(),
        "iat": int(now.timestamp()),
        "exp": int((now + cfg.ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.algorithm)


def verify_token(token: str, *, cfg: JwtAuthConfig) -> AuthPrincipal:
    try:
        claims = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.algorithm],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("token expired") from None
    except jwt.InvalidTokenError:
        raise UnauthorizedError("invalid token") from None
    email = str(claims.get("email") or "").strip()
    if not email:
        raise UnauthorizedError("missing email claim")
    return AuthPrincipal(
        id=str(claims.get("id") or ""),
        email=email,
        role=str(claims.get("role") or "supplier"),
    )


def parse_and_validate_bearer_token(*, authorization: str | None, cfg: JwtAuthConfig) -> AuthPrincipal:
    if not authorization:
        raise UnauthorizedError("missing bearer token")
    prefix = "Bearer "
    if not authorization.startswith(prefix):
        raise UnauthorizedError("invalid Authorization header")
    token = authorization[len(prefix) :].strip()
    if not token:
        raise UnauthorizedError("empty bearer token")
    return verify_token(token, cfg=cfg)
