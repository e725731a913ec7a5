import os
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from passlib.context import CryptContext

from database import DocumentStore, utcnow
from schemas import Admin

logger = logging.getLogger(__name__)

# =====================
# Auth / Security Setup
# =====================
SECRET_KEY = os.getenv("JWT_SECRET", "super-secret-key-change")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 12))
SESSION_COOKIE = "__session"
ADMIN_COLLECTION = "admins"

# Use pbkdf2_sha256 to avoid external bcrypt dependency issues
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class InvalidToken(Exception):
    pass


class TokenVerifier(ABC):
    """Turns an opaque bearer token into its claims or raises InvalidToken."""

    @abstractmethod
    def verify(self, token: str) -> dict:
        ...


class JWTTokenVerifier(TokenVerifier):
    def __init__(self, secret: str = SECRET_KEY, algorithm: str = ALGORITHM):
        self.secret = secret
        self.algorithm = algorithm

    def verify(self, token: str) -> dict:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidToken(str(e)) from e
        if not payload.get("sub"):
            raise InvalidToken("Token has no subject")
        return payload


verifier: TokenVerifier = JWTTokenVerifier()


def get_verifier() -> TokenVerifier:
    return verifier


# =========
# Utilities
# =========

def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def extract_token(request: Request) -> Optional[str]:
    """Bearer header first, then the session cookie."""
    authorization = request.headers.get("authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization.split("Bearer ", 1)[1].strip() or None
    return request.cookies.get(SESSION_COOKIE) or None


def require_admin(request: Request, token_verifier: TokenVerifier = Depends(get_verifier)) -> dict:
    """
    Auth gate for write routes.

    Any caller holding a valid token is treated as the site admin; there is no
    further role check.
    """
    token = extract_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        claims = token_verifier.verify(token)
    except InvalidToken as e:
        logger.warning("Rejected token on %s %s: %s", request.method, request.url.path, e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    request.state.user = claims
    return claims


# ==================
# Admin provisioning
# ==================

def authenticate_admin(target: DocumentStore, email: str, password: str) -> Optional[dict]:
    admin = target.find_one(ADMIN_COLLECTION, {"email": email.strip().lower()})
    if not admin or admin.get("role") != "admin":
        return None
    if not verify_password(password, admin.get("passwordHash", "")):
        return None
    return admin


def provision_admin(target: DocumentStore, email: str, password: str) -> dict:
    """
    Create the admin account for ``email`` or re-grant the admin role to an
    existing one. Safe to run more than once; an existing password is kept.
    """
    if not email or not email.strip() or not password:
        raise ValueError("Email and password required")
    email = email.strip().lower()

    existing = target.find_one(ADMIN_COLLECTION, {"email": email})
    if existing:
        logger.info("Admin %s already exists, checking role", email)
        if existing.get("role") != "admin":
            target.update(ADMIN_COLLECTION, existing["id"], {"role": "admin"})
        return {"success": True, "created": False, "message": f"Admin {email} updated successfully."}

    admin = Admin(email=email, password_hash=hash_password(password))
    doc = admin.model_dump(by_alias=True)
    doc["createdAt"] = utcnow()
    admin_id = target.add(ADMIN_COLLECTION, doc)
    logger.info("Created admin %s (%s)", email, admin_id)
    return {"success": True, "created": True, "message": f"Admin {email} created successfully."}
