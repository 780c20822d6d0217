import jwt
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from core.config import settings


class IdentityTokenError(Exception):
    """Base class for identity token verification failures."""


class TokenExpiredError(IdentityTokenError):
    pass


class InvalidTokenError(IdentityTokenError):
    pass


@dataclass(frozen=True)
class IdentityPrincipal:
    """Decoded identity-provider principal."""
    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    is_admin: bool = False


@lru_cache(maxsize=1)
def _jwks_client(url: str) -> jwt.PyJWKClient:
    return jwt.PyJWKClient(url)


def _decode(token: str) -> dict:
    options = {"require": ["exp"]}
    if settings.IDENTITY_JWKS_URL:
        signing_key = _jwks_client(settings.IDENTITY_JWKS_URL).get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=settings.IDENTITY_AUDIENCE,
            issuer=settings.IDENTITY_ISSUER,
            options=options,
        )

    if settings.IDENTITY_AUDIENCE is None:
        options["verify_aud"] = False
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.IDENTITY_AUDIENCE,
        issuer=settings.IDENTITY_ISSUER,
        options=options,
    )


def verify_identity_token(token: str) -> IdentityPrincipal:
    """Verify an externally issued identity token.

    Raises:
        TokenExpiredError: the token is past its ``exp``.
        InvalidTokenError: bad signature, wrong issuer/audience or missing uid.
    """
    try:
        payload = _decode(token)
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError(str(e)) from e
    except jwt.PyJWKClientError as e:
        raise InvalidTokenError(str(e)) from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(str(e)) from e

    uid = payload.get("user_id") or payload.get("sub")
    if not uid:
        raise InvalidTokenError("Token has no subject")

    email = payload.get("email")
    return IdentityPrincipal(
        uid=str(uid),
        email=email.lower() if email else None,
        name=payload.get("name"),
        is_admin=payload.get("admin") is True,
    )

