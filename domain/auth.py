"""Domain Entities - Auth"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class User(BaseModel):
    """User Entity (identity store)"""
    id: str
    user_name: str
    email: Optional[str] = None
    email_confirmed: bool = False
    lockout_enabled: bool = True
    lockout_end: Optional[datetime] = None
    access_failed_count: int = 0

    class Config:
        from_attributes = True


class UserInDB(User):
    """User with hashed password for DB storage"""
    password_hash: Optional[str] = None


class Claim(BaseModel):
    """A named permission/attribute attached to a user"""
    type: str
    value: str


@dataclass(frozen=True)
class IdentityError:
    code: str
    description: str


@dataclass
class IdentityResult:
    """Outcome of an identity store write"""
    succeeded: bool
    errors: List[IdentityError] = field(default_factory=list)

    @classmethod
    def success(cls) -> "IdentityResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, *errors: IdentityError) -> "IdentityResult":
        return cls(succeeded=False, errors=list(errors))


class SignInResult(str, Enum):
    SUCCEEDED = "SUCCEEDED"
    LOCKED_OUT = "LOCKED_OUT"
    FAILED = "FAILED"
