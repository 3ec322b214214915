"""API Schemas - Request and Response DTOs"""
from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from uuid import UUID
from typing import Dict, List, Optional


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class RegisterUserRequest(BaseModel):
    """Registration request DTO"""
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)
    confirm_password: str = Field(alias="confirmPassword")

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v, info: ValidationInfo):
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("As senhas nao conferem")
        return v

    class Config:
        populate_by_name = True


class LoginUserRequest(BaseModel):
    """Login request DTO"""
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)


class UserClaimResponse(BaseModel):
    """Claim carried by an issued token"""
    value: str
    type: str


class UserTokenResponse(BaseModel):
    id: str
    email: Optional[str] = None
    claims: List[UserClaimResponse] = []


class TokenResponse(BaseModel):
    """Token bundle response DTO"""
    access_token: str
    expires_in: int
    user_token: UserTokenResponse

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TokenData(BaseModel):
    """Authenticated principal decoded from a bearer token"""
    user_id: str
    email: Optional[str] = None
    claims: Dict[str, List[str]] = {}

    def has_claim(self, claim_type: str, value: Optional[str] = None) -> bool:
        values = self.claims.get(claim_type)
        if not values:
            return False
        return value is None or value in values


# ============================================================================
# FORNECEDOR SCHEMAS
# ============================================================================

class FornecedorRequest(BaseModel):
    """Fornecedor request DTO, also used to re-validate stored entities"""
    id: Optional[UUID] = None
    nome: str = Field(max_length=200)
    documento: str = Field(max_length=20)
    ativo: bool = True

    @field_validator("nome", "documento")
    @classmethod
    def not_blank(cls, v: str):
        if not v.strip():
            raise ValueError("Campo obrigatorio")
        return v


class FornecedorResponse(BaseModel):
    """Fornecedor response DTO"""
    id: UUID
    nome: str
    documento: str
    ativo: bool

    class Config:
        from_attributes = True


# ============================================================================
# ERROR SCHEMAS
# ============================================================================

class ValidationProblem(BaseModel):
    """Problem details body for validation failures"""
    type: str = "https://tools.ietf.org/html/rfc9110#section-15.5.1"
    title: str = "One or more validation errors occurred."
    status: int = 400
    errors: Dict[str, List[str]]
