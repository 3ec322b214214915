"""Token issuance - JWT settings plus the functions that build a token bundle"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from domain.auth import Claim, User
from infrastructure.config import Settings, settings as app_settings
from infrastructure.security import encode_token

# Set by jwt_claims; user and role claims may not override them
REGISTERED_CLAIMS = frozenset({"sub", "email", "jti", "nbf", "iat", "exp", "iss", "aud"})


@dataclass(frozen=True)
class JwtSettings:
    """Signing configuration for issued tokens"""
    secret_key: str
    expiration_hours: int = 1
    issuer: str = "MinimalApi"
    valid_at: str = "https://localhost"

    @classmethod
    def from_settings(cls, settings: Settings = app_settings) -> "JwtSettings":
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            expiration_hours=settings.JWT_EXPIRATION_HOURS,
            issuer=settings.JWT_ISSUER,
            valid_at=settings.JWT_VALID_AT,
        )


@dataclass
class TokenBundle:
    """Signed token plus the claims it carries"""
    access_token: str
    expires_in: int
    user_id: str
    email: Optional[str]
    claims: List[Claim]


def jwt_claims(user: User, jwt_settings: JwtSettings, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Registered claims: sub, email, jti, nbf, iat, exp, iss, aud"""
    now = now or datetime.now(timezone.utc)
    issued_at = int(now.timestamp())
    expires = now + timedelta(hours=jwt_settings.expiration_hours)
    return {
        "sub": user.id,
        "email": user.email,
        "jti": str(uuid4()),
        "nbf": issued_at,
        "iat": issued_at,
        "exp": int(expires.timestamp()),
        "iss": jwt_settings.issuer,
        "aud": jwt_settings.valid_at,
    }


def merge_claims(payload: Dict[str, Any], claims: List[Claim]) -> Dict[str, Any]:
    """Add claims to a payload; a repeated type becomes a list of values.

    Claims named like a registered claim are skipped.
    """
    merged = dict(payload)
    for claim in claims:
        if claim.type in REGISTERED_CLAIMS:
            continue
        if claim.type not in merged:
            merged[claim.type] = claim.value
        elif isinstance(merged[claim.type], list):
            merged[claim.type].append(claim.value)
        else:
            merged[claim.type] = [merged[claim.type], claim.value]
    return merged


def build_token(
    user: User,
    jwt_settings: JwtSettings,
    user_claims: List[Claim],
    roles: List[str],
) -> TokenBundle:
    """Sign a token carrying the standard claims, the user claims and the role claims"""
    claims = [c for c in user_claims if c.type not in REGISTERED_CLAIMS]
    claims += [Claim(type="role", value=role) for role in roles]
    payload = merge_claims(jwt_claims(user, jwt_settings), claims)
    token = encode_token(payload, secret_key=jwt_settings.secret_key)
    return TokenBundle(
        access_token=token,
        expires_in=jwt_settings.expiration_hours * 3600,
        user_id=user.id,
        email=user.email,
        claims=claims,
    )
