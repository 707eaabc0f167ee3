from fastapi import APIRouter, Depends, HTTPException
from jose import JWTError
from app.api.deps import get_current_identity, get_data_service
from app.core.security import Identity, create_access_token, create_refresh_token, decode_token
from app.db.gateway import DataService
from app.schemas.auth import LoginRequest, ProfileOut, RefreshRequest, SignUpRequest, TokenPair, password_strength
from app.services import profile_service

router = APIRouter(tags=["auth"])

def _tokens(profile) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(profile.id, profile.role),
        refresh_token=create_refresh_token(profile.id, profile.role),
    )

@router.post("/auth/signup", response_model=ProfileOut, status_code=201)
def signup(body: SignUpRequest, data: DataService = Depends(get_data_service)):
    return profile_service.sign_up(data, body.email, body.password, body.username, body.phone)

@router.post("/auth/login", response_model=TokenPair)
def login(body: LoginRequest, data: DataService = Depends(get_data_service)):
    return _tokens(profile_service.authenticate(data, body.email, body.password))

@router.post("/auth/admin/login", response_model=TokenPair)
def admin_login(body: LoginRequest, data: DataService = Depends(get_data_service)):
    return _tokens(profile_service.authenticate_admin(data, body.email, body.password))

@router.post("/auth/refresh", response_model=TokenPair)
def refresh(body: RefreshRequest, data: DataService = Depends(get_data_service)):
    try:
        payload = decode_token(body.refresh_token)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    if payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    profile = profile_service.get_profile(data, payload.get("sub"))
    if not profile:
        raise HTTPException(status_code=401, detail="User not found")
    return _tokens(profile)

@router.get("/auth/me", response_model=ProfileOut)
def me(identity: Identity = Depends(get_current_identity), data: DataService = Depends(get_data_service)):
    """Current profile including role."""
    profile = profile_service.get_profile(data, identity.user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile

@router.get("/auth/password-strength")
def check_password_strength(password: str):
    return password_strength(password)
