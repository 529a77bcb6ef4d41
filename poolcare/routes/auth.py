import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth import CurrentUser, authenticate, create_access_token, get_current_user
from ..config import LOGIN_RPM
from ..database import get_db
from ..models import Cleaner
from ..rate_limiter import create_rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Brute force protection on the only password endpoint
rate_limit_login = create_rate_limiter(
    limit=LOGIN_RPM,
    window_seconds=60,
    key_prefix="login",
    use_ip=True,
)


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    kind: str
    role: str
    name: str


class MeResponse(BaseModel):
    id: str
    kind: str
    role: str
    email: str
    name: str


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_login),
):
    """Exchange email and password for a bearer token (dashboard users and cleaners)"""
    principal = authenticate(db, data.email, data.password)
    token = create_access_token(principal)
    kind = "cleaner" if isinstance(principal, Cleaner) else "dashboard"
    logger.info(f"✅ Login: {principal.email} ({kind}, {principal.role})")
    return TokenResponse(access_token=token, kind=kind, role=principal.role, name=principal.name)


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: CurrentUser = Depends(get_current_user)):
    return MeResponse(
        id=current_user.id,
        kind=current_user.kind,
        role=current_user.role,
        email=current_user.email,
        name=current_user.name,
    )
