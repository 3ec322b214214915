"""API Dependencies - services, authentication and authorization"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from api.schemas import TokenData
from application.identity import IdentityService, LockoutOptions
from application.jwt_builder import REGISTERED_CLAIMS, JwtSettings
from application.services import AuthService, FornecedorService
from infrastructure.config import settings
from infrastructure.database import get_session
from infrastructure.repositories.sqlalchemy_repositories import (
    SqlAlchemyFornecedorRepository, SqlAlchemyUserRepository
)
from infrastructure.security import decode_token

log = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="Insira o token JWT desta maneira: Bearer {seu token}")


# Dependency injection
def get_jwt_settings() -> JwtSettings:
    return JwtSettings.from_settings(settings)

def get_identity_service(db: Session = Depends(get_session)) -> IdentityService:
    lockout = LockoutOptions(
        max_failed_access_attempts=settings.LOCKOUT_MAX_FAILED_ATTEMPTS,
        lockout_minutes=settings.LOCKOUT_MINUTES,
    )
    return IdentityService(SqlAlchemyUserRepository(db), lockout_options=lockout)

def get_auth_service(
    identity: IdentityService = Depends(get_identity_service),
    jwt_settings: JwtSettings = Depends(get_jwt_settings),
) -> AuthService:
    return AuthService(identity, jwt_settings)

def get_fornecedor_service(db: Session = Depends(get_session)) -> FornecedorService:
    return FornecedorService(SqlAlchemyFornecedorRepository(db))


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_settings: JwtSettings = Depends(get_jwt_settings),
) -> TokenData:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if creds is None:
        raise credentials_exception
    try:
        payload = decode_token(
            creds.credentials,
            secret_key=jwt_settings.secret_key,
            issuer=jwt_settings.issuer,
            audience=jwt_settings.valid_at,
        )
    except JWTError as e:
        log.warning("Invalid/expired token: %s", e)
        raise credentials_exception from e

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    claims = {}
    for key, value in payload.items():
        if key in REGISTERED_CLAIMS:
            continue
        claims[key] = [str(v) for v in value] if isinstance(value, list) else [str(value)]
    return TokenData(user_id=user_id, email=payload.get("email"), claims=claims)


def require_claim(claim_type: str, value: Optional[str] = None):
    """Authorization policy: the principal must carry claim_type (optionally with value)"""

    def _check(current_user: TokenData = Depends(get_current_user)) -> TokenData:
        if not current_user.has_claim(claim_type, value):
            log.warning("User %s lacks claim %s", current_user.user_id, claim_type)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions")
        return current_user

    return _check
