import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Union

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, SECRET_KEY
from .database import get_db
from .models import Cleaner, DashboardUser
from .shared.timeutils import utcnow

logger = logging.getLogger(__name__)

security = HTTPBearer()

# Password hashing context
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

MANAGEMENT_ROLES = ("admin", "manager")


@dataclass
class CurrentUser:
    """Authenticated principal: a dashboard user or a cleaner"""

    id: str
    kind: str  # "dashboard" or "cleaner"
    role: str
    email: str
    name: str

    @property
    def can_manage(self) -> bool:
        return self.role in MANAGEMENT_ROLES


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        logger.error(f"Password verification error: {e}")
        return False


def create_access_token(principal: Union[DashboardUser, Cleaner], expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed access token for a dashboard user or cleaner"""
    kind = "cleaner" if isinstance(principal, Cleaner) else "dashboard"
    expire = utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": principal.id,
        "kind": kind,
        "role": principal.role,
        "email": principal.email,
        "exp": expire,
    }
    return jose_jwt.encode(claims, SECRET_KEY, algorithm=JWT_ALGORITHM)


def authenticate(db: Session, email: str, password: str) -> Union[DashboardUser, Cleaner]:
    """
    Resolve credentials to a principal.

    Dashboard users are checked before cleaners, matching how roles are resolved.
    """
    email = (email or "").strip().lower()

    principal = db.query(DashboardUser).filter(DashboardUser.email == email).first()
    if principal is None:
        principal = db.query(Cleaner).filter(Cleaner.email == email).first()

    if principal is None or not verify_password(password, principal.password_hash):
        logger.warning(f"⚠️ Failed login attempt for {email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not principal.active:
        logger.warning(f"⚠️ Inactive account attempted login: {email}")
        raise HTTPException(status_code=403, detail="Account is inactive")

    return principal


def _load_principal(db: Session, kind: str, principal_id: str) -> Optional[Union[DashboardUser, Cleaner]]:
    if kind == "dashboard":
        return db.query(DashboardUser).filter(DashboardUser.id == principal_id).first()
    if kind == "cleaner":
        return db.query(Cleaner).filter(Cleaner.id == principal_id).first()
    return None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Get current user from bearer token"""

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials

    try:
        claims = jose_jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please sign in again.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"⚠️ Token verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token") from e

    principal_id = claims.get("sub")
    kind = claims.get("kind")
    if not principal_id or not kind:
        raise HTTPException(status_code=401, detail="Invalid token claims")

    principal = _load_principal(db, kind, principal_id)
    if principal is None:
        logger.warning(f"⚠️ Token for unknown {kind} {principal_id}")
        raise HTTPException(status_code=401, detail="Account not found")

    if not principal.active:
        raise HTTPException(status_code=403, detail="Account is inactive")

    return CurrentUser(
        id=principal.id,
        kind=kind,
        role=principal.role,
        email=principal.email,
        name=principal.name,
    )


def require_roles(*roles: str):
    """
    Create a dependency that only lets the given roles through

    Example usage:
        @router.post("", dependencies=[Depends(require_roles("admin", "manager"))])
    """

    async def role_guard(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            logger.warning(f"⚠️ {user.email} ({user.role}) denied, requires one of {roles}")
            raise HTTPException(status_code=403, detail="You do not have permission for this action")
        return user

    return role_guard


require_management = require_roles(*MANAGEMENT_ROLES)
