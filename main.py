import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional
from uuid import UUID

from fastapi import Body, Depends, FastAPI, HTTPException, Response, status

from api.dependencies import (
    get_auth_service, get_current_user, get_fornecedor_service, require_claim
)
from api.errors import init_error_handlers, validation_problem
from api.middleware import RequestContextMiddleware
from api.schemas import (
    # Auth
    RegisterUserRequest, LoginUserRequest, TokenResponse, TokenData,
    # Fornecedor
    FornecedorRequest, FornecedorResponse, ValidationProblem,
)
from application.jwt_builder import TokenBundle
from application.services import AuthService, FornecedorService
from application.validation import try_validate
from domain.auth import SignInResult
from domain.entities import Fornecedor
from infrastructure.config import settings
from infrastructure.database import create_db_and_tables
from infrastructure.logging import setup_logging

setup_logging(settings.LOG_LEVEL, use_colors=settings.LOG_COLORS)
log = logging.getLogger(__name__)

SAVE_ERROR = "Houve um problema ao salvar o registro"
NOT_FOUND = "Fornecedor nao encontrado"


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Starting %s v%s (%s)", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)
    create_db_and_tables()
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="API de cadastro de fornecedores com autenticacao JWT",
    version=settings.APP_VERSION,
    # Swagger only in development
    docs_url="/docs" if settings.is_development else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.is_development else None,
    lifespan=lifespan,
)
app.add_middleware(RequestContextMiddleware)
init_error_handlers(app)


def _token_to_response(bundle: TokenBundle) -> TokenResponse:
    return TokenResponse(
        access_token=bundle.access_token,
        expires_in=bundle.expires_in,
        user_token={
            "id": bundle.user_id,
            "email": bundle.email,
            "claims": [{"value": c.value, "type": c.type} for c in bundle.claims],
        },
    )

# ============================================================================
# HEALTH
# ============================================================================

@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

# ============================================================================
# USUARIO ENDPOINTS
# ============================================================================

@app.post(
    "/registro",
    response_model=TokenResponse,
    responses={400: {"model": ValidationProblem}},
    name="RegistroUsuario",
    tags=["Usuario"],
)
def registro_usuario(
    register_user: Optional[RegisterUserRequest] = Body(None),
    service: AuthService = Depends(get_auth_service),
):
    """Register a user and return its token bundle"""
    if register_user is None:
        raise HTTPException(status_code=400, detail="Usuario nao informado!")

    result, bundle = service.register(register_user.email, register_user.password)
    if not result.succeeded:
        raise HTTPException(
            status_code=400,
            detail=[{"code": e.code, "description": e.description} for e in result.errors],
        )
    return _token_to_response(bundle)


@app.post(
    "/login",
    response_model=TokenResponse,
    responses={400: {"model": ValidationProblem}},
    name="LoginUsuario",
    tags=["Usuario"],
)
def login_usuario(
    login_user: Optional[LoginUserRequest] = Body(None),
    service: AuthService = Depends(get_auth_service),
):
    """Check credentials (with lockout) and return a token bundle"""
    if login_user is None:
        raise HTTPException(status_code=400, detail="Usuario nao informado!")

    result, bundle = service.login(login_user.email, login_user.password)
    if result == SignInResult.LOCKED_OUT:
        raise HTTPException(status_code=400, detail="Usuario bloqueado")
    if result != SignInResult.SUCCEEDED:
        raise HTTPException(status_code=400, detail="Usuario e/ou senha invalido!")
    return _token_to_response(bundle)

# ============================================================================
# FORNECEDOR ENDPOINTS
# ============================================================================

@app.get("/fornecedor", response_model=List[FornecedorResponse], name="GetFornecedor", tags=["Fornecedor"])
def get_fornecedores(
    service: FornecedorService = Depends(get_fornecedor_service),
    current_user: TokenData = Depends(get_current_user),
):
    """Get all fornecedores"""
    return service.get_all_fornecedores()


@app.get(
    "/fornecedor/{fornecedor_id}",
    response_model=FornecedorResponse,
    responses={404: {"description": NOT_FOUND}},
    name="GetFornecedorPorId",
    tags=["Fornecedor"],
)
def get_fornecedor_por_id(
    fornecedor_id: UUID,
    service: FornecedorService = Depends(get_fornecedor_service),
    current_user: TokenData = Depends(get_current_user),
):
    """Get fornecedor by ID"""
    fornecedor = service.get_fornecedor(fornecedor_id)
    if not fornecedor:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return fornecedor


@app.post(
    "/fornecedor",
    response_model=FornecedorResponse,
    status_code=201,
    responses={400: {"model": ValidationProblem}},
    name="PostFornecedor",
    tags=["Fornecedor"],
)
def post_fornecedor(
    request: FornecedorRequest,
    response: Response,
    service: FornecedorService = Depends(get_fornecedor_service),
    current_user: TokenData = Depends(get_current_user),
):
    """Create fornecedor"""
    data = request.model_dump(exclude_none=True)
    fornecedor = Fornecedor(**data)

    if service.create_fornecedor(fornecedor) <= 0:
        raise HTTPException(status_code=400, detail=SAVE_ERROR)

    response.headers["Location"] = f"/fornecedor/{fornecedor.id}"
    return fornecedor


@app.put(
    "/fornecedor/{fornecedor_id}",
    status_code=204,
    responses={400: {"model": ValidationProblem}, 404: {"description": NOT_FOUND}},
    name="PutFornecedor",
    tags=["Fornecedor"],
)
def put_fornecedor(
    fornecedor_id: UUID,
    payload: Any = Body(None),
    service: FornecedorService = Depends(get_fornecedor_service),
    current_user: TokenData = Depends(get_current_user),
):
    """Replace every field of a fornecedor with the submitted payload"""
    if not service.exists(fornecedor_id):
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    if payload is None:
        raise HTTPException(status_code=400, detail="Fornecedor nao informado!")
    if not isinstance(payload, dict):
        return validation_problem({"body": ["Input should be a valid dictionary"]})

    ok, errors = try_validate(FornecedorRequest, payload)
    if not ok:
        return validation_problem(errors)

    request = FornecedorRequest.model_validate(payload)
    if request.id is not None and request.id != fornecedor_id:
        raise HTTPException(status_code=400, detail="Id do fornecedor diverge da rota")

    # Full replace: the submitted entity is written as-is, never merged
    fornecedor = Fornecedor(id=fornecedor_id, nome=request.nome, documento=request.documento, ativo=request.ativo)
    if service.replace_fornecedor(fornecedor) <= 0:
        raise HTTPException(status_code=400, detail=SAVE_ERROR)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.delete(
    "/fornecedor/{fornecedor_id}",
    status_code=204,
    responses={400: {"model": ValidationProblem}, 403: {"description": "Not enough permissions"}, 404: {"description": NOT_FOUND}},
    name="DeleteFornecedor",
    tags=["Fornecedor"],
)
def delete_fornecedor(
    fornecedor_id: UUID,
    service: FornecedorService = Depends(get_fornecedor_service),
    current_user: TokenData = Depends(require_claim("ExcluirFornecedor")),
):
    """Delete fornecedor (requires the ExcluirFornecedor claim)"""
    fornecedor = service.get_fornecedor(fornecedor_id)
    if not fornecedor:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    # The stored entity is re-validated before removal
    ok, errors = try_validate(FornecedorRequest, fornecedor)
    if not ok:
        return validation_problem(errors)

    if service.delete_fornecedor(fornecedor_id) <= 0:
        raise HTTPException(status_code=400, detail=SAVE_ERROR)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
