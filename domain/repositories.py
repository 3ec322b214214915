"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from domain.entities import Fornecedor
from domain.auth import UserInDB, Claim


class FornecedorRepository(ABC):
    """Repository interface for Fornecedor"""

    @abstractmethod
    def find_all(self) -> List[Fornecedor]:
        """Find all fornecedores"""

    @abstractmethod
    def find_by_id(self, fornecedor_id: UUID) -> Optional[Fornecedor]:
        """Find fornecedor by ID"""

    @abstractmethod
    def exists(self, fornecedor_id: UUID) -> bool:
        """Read-only existence check"""

    @abstractmethod
    def add(self, fornecedor: Fornecedor) -> int:
        """Insert and commit; returns affected rows"""

    @abstractmethod
    def update(self, fornecedor: Fornecedor) -> int:
        """Replace every field of the stored row; returns affected rows"""

    @abstractmethod
    def delete(self, fornecedor_id: UUID) -> int:
        """Delete and commit; returns affected rows"""


class UserRepository(ABC):
    """Repository interface for the identity store"""

    @abstractmethod
    def find_by_name(self, normalized_user_name: str) -> Optional[UserInDB]:
        pass

    @abstractmethod
    def create(self, user: UserInDB) -> UserInDB:
        pass

    @abstractmethod
    def update_lockout(self, user_id: str, access_failed_count: int, lockout_end: Optional[datetime]) -> None:
        """Persist the lockout counters of a user"""

    @abstractmethod
    def increment_access_failed_count(self, user_id: str) -> int:
        """Atomically add one failed attempt; returns the new count"""

    @abstractmethod
    def get_claims(self, user_id: str) -> List[Claim]:
        pass

    @abstractmethod
    def add_claim(self, user_id: str, claim: Claim) -> None:
        pass

    @abstractmethod
    def get_roles(self, user_id: str) -> List[str]:
        pass

    @abstractmethod
    def add_to_role(self, user_id: str, role_name: str) -> None:
        """Assign a role, creating it on first use"""
