import hashlib
from typing import Any, Dict, Optional

from jose import jwt
from passlib.context import CryptContext

from infrastructure.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    # bcrypt 4.x compatibility: explicitly handle password length
    bcrypt__ident="2b"
)

def _prepare_password(password: str) -> str:
    """
    Prepare password for bcrypt to handle strings > 72 bytes.
    bcrypt has a 72-byte password limit. If password is longer,
    we pre-hash it with SHA256 to get a safe length string.
    """
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        return hashlib.sha256(password_bytes).hexdigest()
    return password

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    return pwd_context.verify(_prepare_password(plain_password), hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash"""
    return pwd_context.hash(_prepare_password(password))

def encode_token(claims: Dict[str, Any], secret_key: Optional[str] = None) -> str:
    """Sign a claims dict"""
    return jwt.encode(claims, secret_key or settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

def decode_token(
    token: str,
    secret_key: Optional[str] = None,
    issuer: Optional[str] = None,
    audience: Optional[str] = None,
) -> Dict[str, Any]:
    """Verify signature, expiry, issuer and audience; raises jose.JWTError"""
    return jwt.decode(
        token,
        secret_key or settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        issuer=issuer or settings.JWT_ISSUER,
        audience=audience or settings.JWT_VALID_AT,
    )
