"""Application Services - Business use cases"""
import logging
from typing import List, Optional, Tuple
from uuid import UUID

from application.identity import IdentityService
from application.jwt_builder import JwtSettings, TokenBundle, build_token
from domain.auth import IdentityResult, SignInResult, User
from domain.entities import Fornecedor
from domain.repositories import FornecedorRepository

log = logging.getLogger(__name__)


class AuthService:
    """Service for registration and login"""

    def __init__(self, identity: IdentityService, jwt_settings: JwtSettings):
        self.identity = identity
        self.jwt_settings = jwt_settings

    def issue_token(self, user: User) -> TokenBundle:
        """Build a token bundle with the user's claims and roles"""
        return build_token(
            user,
            self.jwt_settings,
            user_claims=self.identity.get_claims(user),
            roles=self.identity.get_roles(user),
        )

    def register(self, email: str, password: str) -> Tuple[IdentityResult, Optional[TokenBundle]]:
        """Create a confirmed user and sign a token for it"""
        # No verification flow: the email is confirmed on creation
        result, user = self.identity.create_user(email, password, email_confirmed=True)
        if not result.succeeded:
            return result, None
        return result, self.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[SignInResult, Optional[TokenBundle]]:
        result = self.identity.password_sign_in(email, password, lockout_on_failure=True)
        if result != SignInResult.SUCCEEDED:
            log.info("Login failed for %s: %s", email, result.value)
            return result, None
        user = self.identity.find_by_email(email)
        return result, self.issue_token(user)


class FornecedorService:
    """Service for Fornecedor use cases"""

    def __init__(self, repository: FornecedorRepository):
        self.repository = repository

    def get_all_fornecedores(self) -> List[Fornecedor]:
        return self.repository.find_all()

    def get_fornecedor(self, fornecedor_id: UUID) -> Optional[Fornecedor]:
        return self.repository.find_by_id(fornecedor_id)

    def exists(self, fornecedor_id: UUID) -> bool:
        return self.repository.exists(fornecedor_id)

    def create_fornecedor(self, fornecedor: Fornecedor) -> int:
        """Insert; returns affected rows"""
        rows = self.repository.add(fornecedor)
        log.info("Fornecedor %s created (%d row)", fornecedor.id, rows)
        return rows

    def replace_fornecedor(self, fornecedor: Fornecedor) -> int:
        """Overwrite every field of the stored row with the given entity"""
        rows = self.repository.update(fornecedor)
        log.info("Fornecedor %s updated (%d row)", fornecedor.id, rows)
        return rows

    def delete_fornecedor(self, fornecedor_id: UUID) -> int:
        rows = self.repository.delete(fornecedor_id)
        log.info("Fornecedor %s deleted (%d row)", fornecedor_id, rows)
        return rows
