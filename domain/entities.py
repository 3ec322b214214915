"""Domain Entities"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4


class Fornecedor(BaseModel):
    """Fornecedor (supplier) Entity"""

    # Identity
    id: UUID = Field(default_factory=uuid4)

    # Business attributes
    nome: str
    documento: str
    ativo: bool = True

    class Config:
        from_attributes = True
