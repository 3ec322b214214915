"""
Identity subsystem - user creation, password policy, sign-in with lockout,
roles and claims.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from domain.auth import Claim, IdentityError, IdentityResult, SignInResult, User, UserInDB
from application.jwt_builder import REGISTERED_CLAIMS
from domain.repositories import UserRepository
from infrastructure.security import get_password_hash, verify_password

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PasswordOptions:
    required_length: int = 6
    required_unique_chars: int = 1
    require_digit: bool = True
    require_lowercase: bool = True
    require_uppercase: bool = True
    require_non_alphanumeric: bool = True


@dataclass(frozen=True)
class LockoutOptions:
    max_failed_access_attempts: int = 3
    lockout_minutes: int = 5
    allowed_for_new_users: bool = True


def validate_password(password: str, options: PasswordOptions = PasswordOptions()) -> List[IdentityError]:
    """Return one error per policy rule the password breaks"""
    errors = []
    if len(password) < options.required_length:
        errors.append(IdentityError(
            "PasswordTooShort",
            f"Passwords must be at least {options.required_length} characters.",
        ))
    if options.require_non_alphanumeric and all(c.isalnum() for c in password):
        errors.append(IdentityError(
            "PasswordRequiresNonAlphanumeric",
            "Passwords must have at least one non alphanumeric character.",
        ))
    if options.require_digit and not any(c.isdigit() for c in password):
        errors.append(IdentityError("PasswordRequiresDigit", "Passwords must have at least one digit ('0'-'9')."))
    if options.require_lowercase and not any(c.islower() for c in password):
        errors.append(IdentityError("PasswordRequiresLower", "Passwords must have at least one lowercase ('a'-'z')."))
    if options.require_uppercase and not any(c.isupper() for c in password):
        errors.append(IdentityError("PasswordRequiresUpper", "Passwords must have at least one uppercase ('A'-'Z')."))
    if options.required_unique_chars >= 1 and len(set(password)) < options.required_unique_chars:
        errors.append(IdentityError(
            "PasswordRequiresUniqueChars",
            f"Passwords must use at least {options.required_unique_chars} different characters.",
        ))
    return errors


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class IdentityService:
    """User manager and sign-in manager over a UserRepository"""

    def __init__(
        self,
        repository: UserRepository,
        password_options: PasswordOptions = PasswordOptions(),
        lockout_options: LockoutOptions = LockoutOptions(),
    ):
        self.repository = repository
        self.password_options = password_options
        self.lockout_options = lockout_options

    # ==================== USER MANAGER ====================
    def find_by_email(self, email: str) -> Optional[UserInDB]:
        return self.repository.find_by_name(email.upper())

    def create_user(self, email: str, password: str, email_confirmed: bool = False) -> Tuple[IdentityResult, Optional[User]]:
        """Create a user whose user name is its email"""
        errors = validate_password(password, self.password_options)
        if self.repository.find_by_name(email.upper()) is not None:
            errors.insert(0, IdentityError("DuplicateUserName", f"Username '{email}' is already taken."))
        if errors:
            log.info("User creation rejected for %s: %s", email, ", ".join(e.code for e in errors))
            return IdentityResult.failed(*errors), None

        user = self.repository.create(UserInDB(
            id=str(uuid.uuid4()),
            user_name=email,
            email=email,
            email_confirmed=email_confirmed,
            lockout_enabled=self.lockout_options.allowed_for_new_users,
            password_hash=get_password_hash(password),
        ))
        log.info("User created: %s", user.id)
        return IdentityResult.success(), User.model_validate(user.model_dump())

    def get_claims(self, user: User) -> List[Claim]:
        return self.repository.get_claims(user.id)

    def add_claim(self, user: User, claim_type: str, claim_value: str) -> None:
        if claim_type in REGISTERED_CLAIMS:
            raise ValueError(f"'{claim_type}' is a registered token claim")
        self.repository.add_claim(user.id, Claim(type=claim_type, value=claim_value))

    def get_roles(self, user: User) -> List[str]:
        return self.repository.get_roles(user.id)

    def add_to_role(self, user: User, role_name: str) -> None:
        self.repository.add_to_role(user.id, role_name)

    # ==================== SIGN-IN MANAGER ====================
    def is_locked_out(self, user: User, now: Optional[datetime] = None) -> bool:
        if not user.lockout_enabled:
            return False
        lockout_end = _as_utc(user.lockout_end)
        return lockout_end is not None and lockout_end > (now or datetime.now(timezone.utc))

    def password_sign_in(self, email: str, password: str, lockout_on_failure: bool = True) -> SignInResult:
        """Check credentials and apply the lockout policy"""
        user = self.find_by_email(email)
        if user is None:
            return SignInResult.FAILED

        now = datetime.now(timezone.utc)
        if self.is_locked_out(user, now):
            log.warning("Sign-in attempt for locked out user %s", user.id)
            return SignInResult.LOCKED_OUT

        if user.password_hash and verify_password(password, user.password_hash):
            if user.access_failed_count:
                self.repository.update_lockout(user.id, 0, None)
            return SignInResult.SUCCEEDED

        if lockout_on_failure and user.lockout_enabled:
            # Incremented in the database, not from the snapshot read above
            failed = self.repository.increment_access_failed_count(user.id)
            if failed >= self.lockout_options.max_failed_access_attempts:
                lockout_end = now + timedelta(minutes=self.lockout_options.lockout_minutes)
                self.repository.update_lockout(user.id, 0, lockout_end)
                log.warning("User %s locked out until %s", user.id, lockout_end.isoformat())
                return SignInResult.LOCKED_OUT
        return SignInResult.FAILED
