from dataclasses import dataclass
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis import Redis, RedisError
import jwt
from dailygreens.api.deps import get_cache
from dailygreens.core.config import settings
from dailygreens.store.cache import is_token_revoked

security = HTTPBearer(auto_error=False)

@dataclass(frozen=True)
class Identity:
    user_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

def get_current_identity(
    creds: HTTPAuthorizationCredentials = Depends(security),
    cache: Redis = Depends(get_cache),
) -> Identity:
    if not creds:
        raise HTTPException(status_code=401, detail="Authorization header required or invalid format")
    try:
        revoked = is_token_revoked(cache, creds.credentials)
    except RedisError:
        raise HTTPException(status_code=500, detail="Failed to verify token")
    if revoked:
        raise HTTPException(status_code=401, detail="Token has been revoked, please login again")
    try:
        payload = jwt.decode(creds.credentials, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if payload.get("type") != "access":
        raise HTTPException(status_code=401, detail="Invalid access token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token claims")
    return Identity(user_id=user_id, role=payload.get("role") or "customer")

def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=403, detail="Admin only")
    return identity
