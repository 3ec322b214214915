"""SQLAlchemy Repository Implementations"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from domain.auth import Claim, UserInDB
from domain.entities import Fornecedor
from domain.repositories import FornecedorRepository, UserRepository
from infrastructure.models import FornecedorModel, RoleModel, UserClaimModel, UserModel, UserRoleModel

log = logging.getLogger(__name__)


class SqlAlchemyFornecedorRepository(FornecedorRepository):
    """SQLAlchemy implementation of FornecedorRepository"""

    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> List[Fornecedor]:
        rows = self.db.scalars(select(FornecedorModel)).all()
        return [Fornecedor.model_validate(r) for r in rows]

    def find_by_id(self, fornecedor_id: UUID) -> Optional[Fornecedor]:
        row = self.db.get(FornecedorModel, fornecedor_id)
        return Fornecedor.model_validate(row) if row else None

    def exists(self, fornecedor_id: UUID) -> bool:
        # Plain column select: nothing enters the identity map
        stmt = select(FornecedorModel.id).where(FornecedorModel.id == fornecedor_id)
        return self.db.execute(stmt).first() is not None

    def add(self, fornecedor: Fornecedor) -> int:
        result = self.db.execute(insert(FornecedorModel).values(**fornecedor.model_dump()))
        self.db.commit()
        log.debug("Inserted fornecedor %s (%d row)", fornecedor.id, result.rowcount)
        return result.rowcount

    def update(self, fornecedor: Fornecedor) -> int:
        stmt = (
            update(FornecedorModel)
            .where(FornecedorModel.id == fornecedor.id)
            .values(nome=fornecedor.nome, documento=fornecedor.documento, ativo=fornecedor.ativo)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount

    def delete(self, fornecedor_id: UUID) -> int:
        result = self.db.execute(delete(FornecedorModel).where(FornecedorModel.id == fornecedor_id))
        self.db.commit()
        return result.rowcount


class SqlAlchemyUserRepository(UserRepository):
    """SQLAlchemy implementation of the identity store"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_name(self, normalized_user_name: str) -> Optional[UserInDB]:
        row = self.db.scalars(
            select(UserModel).where(UserModel.normalized_user_name == normalized_user_name)
        ).first()
        return UserInDB.model_validate(row) if row else None

    def create(self, user: UserInDB) -> UserInDB:
        row = UserModel(
            id=user.id,
            user_name=user.user_name,
            normalized_user_name=user.user_name.upper(),
            email=user.email,
            normalized_email=user.email.upper() if user.email else None,
            email_confirmed=user.email_confirmed,
            password_hash=user.password_hash,
            lockout_enabled=user.lockout_enabled,
        )
        self.db.add(row)
        self.db.commit()
        return UserInDB.model_validate(row)

    def update_lockout(self, user_id: str, access_failed_count: int, lockout_end: Optional[datetime]) -> None:
        self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(access_failed_count=access_failed_count, lockout_end=lockout_end)
        )
        self.db.commit()

    def increment_access_failed_count(self, user_id: str) -> int:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(access_failed_count=UserModel.access_failed_count + 1)
            .returning(UserModel.access_failed_count)
            .execution_options(synchronize_session="fetch")
        )
        count = self.db.execute(stmt).scalar_one()
        self.db.commit()
        return count

    def get_claims(self, user_id: str) -> List[Claim]:
        rows = self.db.scalars(
            select(UserClaimModel).where(UserClaimModel.user_id == user_id).order_by(UserClaimModel.id)
        ).all()
        return [Claim(type=r.claim_type, value=r.claim_value or "") for r in rows]

    def add_claim(self, user_id: str, claim: Claim) -> None:
        self.db.add(UserClaimModel(user_id=user_id, claim_type=claim.type, claim_value=claim.value))
        self.db.commit()

    def get_roles(self, user_id: str) -> List[str]:
        stmt = (
            select(RoleModel.name)
            .join(UserRoleModel, UserRoleModel.role_id == RoleModel.id)
            .where(UserRoleModel.user_id == user_id)
            .order_by(RoleModel.name)
        )
        return list(self.db.scalars(stmt).all())

    def add_to_role(self, user_id: str, role_name: str) -> None:
        role = self.db.scalars(
            select(RoleModel).where(RoleModel.normalized_name == role_name.upper())
        ).first()
        if role is None:
            role = RoleModel(name=role_name, normalized_name=role_name.upper())
            self.db.add(role)
            self.db.flush()
        if self.db.get(UserRoleModel, (user_id, role.id)) is None:
            self.db.add(UserRoleModel(user_id=user_id, role_id=role.id))
        self.db.commit()
