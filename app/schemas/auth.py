import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[+]?[(]?[0-9]{1,4}[)]?[-\s./0-9]{8,}$")
USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")


def check_email(v: str) -> str:
    v = (v or "").strip().lower()
    if not v:
        raise ValueError("Email is required")
    if not EMAIL_RE.match(v):
        raise ValueError("Please enter a valid email address")
    return v


def check_password(v: str) -> str:
    if not v:
        raise ValueError("Password is required")
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters")
    if not re.search(r"[A-Z]", v):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", v):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", v):
        raise ValueError("Password must contain at least one number")
    return v


def check_phone(v: str) -> str:
    if not v:
        raise ValueError("Phone number is required")
    if not PHONE_RE.match(v):
        raise ValueError("Please enter a valid phone number")
    return v


def check_username(v: str) -> str:
    if not v:
        raise ValueError("Username is required")
    if len(v) < 3:
        raise ValueError("Username must be at least 3 characters")
    if len(v) > 30:
        raise ValueError("Username must be less than 30 characters")
    if not USERNAME_RE.match(v):
        raise ValueError("Username can only contain letters, numbers, and underscores")
    return v


def password_strength(password: str) -> dict:
    score = 0
    if len(password) >= 8:
        score += 1
    if len(password) >= 12:
        score += 1
    for pattern in (r"[A-Z]", r"[a-z]", r"[0-9]", r"[^A-Za-z0-9]"):
        if re.search(pattern, password):
            score += 1
    if score <= 2:
        return {"strength": "weak", "score": score}
    if score <= 4:
        return {"strength": "medium", "score": score}
    return {"strength": "strong", "score": score}


class SignUpRequest(BaseModel):
    email: str
    password: str
    username: str
    phone: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password(v)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return check_username(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return check_phone(v)


class LoginRequest(BaseModel):
    email: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    username: str
    phone: str
    role: str
    created_at: datetime
    updated_at: Optional[datetime] = None
