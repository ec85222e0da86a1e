"""
spinup.auth.jwt

JWT issuing and validation helpers.

Responsibilities:
- Load signing/verification key material once at startup.
- Issue tokens for local/dev scenarios.
- Decode and validate bearer tokens and extract the tenant subject.

Note:
- Production deployments use RS256 with `app.rsa` / `app.rsa.pub` under the
  project directory; HS256 with a shared secret is accepted for dev/test.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from spinup.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    # For HS* both keys are the shared secret; for RS*/ES* they are PEM text.
    signing_key: str | None
    verify_key: str
    issuer: str | None = None
    audience: str | None = None


class JwtValidationError(Exception):
    pass


class JwtConfigError(Exception):
    pass


def load_jwt_config(settings: Settings) -> JwtConfig:
    if settings.jwt_alg.upper().startswith("HS"):
        return JwtConfig(
            alg=settings.jwt_alg,
            signing_key=settings.jwt_secret,
            verify_key=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
        )

    try:
        verify_key = settings.public_key_path.read_text()
    except OSError as e:
        raise JwtConfigError(f"reading public key {settings.public_key_path}: {e}") from e

    # The signing key is optional: a verify-only deployment cannot mint dev tokens.
    signing_key: str | None
    try:
        signing_key = settings.private_key_path.read_text()
    except OSError:
        signing_key = None

    return JwtConfig(
        alg=settings.jwt_alg,
        signing_key=signing_key,
        verify_key=verify_key,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
    )


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    ttl: timedelta = timedelta(hours=1),
) -> str:
    if cfg.signing_key is None:
        raise JwtConfigError("no signing key configured")
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    if cfg.issuer:
        payload["iss"] = cfg.issuer
    if cfg.audience:
        payload["aud"] = cfg.audience
    return jwt.encode(payload, cfg.signing_key, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        # exp is verified whenever present; iss/aud only when configured.
        return jwt.decode(
            token,
            cfg.verify_key,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["sub"],
                "verify_aud": cfg.audience is not None,
            },
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e


def subject_from_header(*, cfg: JwtConfig, auth_header: str | None) -> str:
    """
    Extract the tenant id from a raw `Authorization` header value.
    The header must carry the `Bearer ` prefix.
    """

    if not auth_header or not auth_header.startswith("Bearer "):
        raise JwtValidationError("cannot validate empty token")
    token = auth_header[len("Bearer ") :].strip()
    if not token:
        raise JwtValidationError("cannot validate empty token")
    payload = decode_and_validate(cfg=cfg, token=token)
    subject = str(payload.get("sub", ""))
    if not subject:
        raise JwtValidationError("token has no subject")
    return subject


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `api/routers/dev_auth.py` and the test-suite.
