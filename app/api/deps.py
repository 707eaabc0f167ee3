from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.db.gateway import DataService
from app.core.security import Identity, decode_token
from app.models.profile import Profile

bearer = HTTPBearer(auto_error=False)

def get_data_service(db: Session = Depends(get_db)) -> DataService:
    return DataService(db)

def get_identity(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> Identity | None:
    """Current session identity, or None when the request carries no token."""
    if not creds:
        return None
    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    if payload.get("type") != "access":
        raise HTTPException(status_code=401, detail="Invalid token")
    profile = db.get(Profile, payload.get("sub"))
    if not profile:
        raise HTTPException(status_code=401, detail="User not found")
    # role comes from the profile row, not the token, so demotions apply immediately
    return Identity(user_id=profile.id, role=profile.role)

def get_current_identity(identity: Identity | None = Depends(get_identity)) -> Identity:
    if identity is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return identity

def require_roles(*roles: str):
    def _guard(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in roles:
            raise HTTPException(status_code=403, detail="Forbidden")
        return identity
    return _guard
