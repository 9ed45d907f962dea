"""Authentication schemas"""

from typing import Annotated, Any, Dict, Literal, Optional, Union
from pydantic import AliasChoices, BaseModel, Field


class TokenClaims(BaseModel):
    """Claims carried by the backend's access token"""
    user_id: int = Field(validation_alias=AliasChoices("user_id", "sub"))
    role: str
    exp: int
    name: Optional[str] = None
    member_id: Optional[int] = None


class TokenOk(BaseModel):
    kind: Literal["ok"] = "ok"
    claims: TokenClaims


class TokenExpired(BaseModel):
    kind: Literal["expired"] = "expired"
    expired_at: int


class TokenMalformed(BaseModel):
    kind: Literal["malformed"] = "malformed"
    reason: str


TokenResult = Annotated[
    Union[TokenOk, TokenExpired, TokenMalformed],
    Field(discriminator="kind"),
]


class LoginRequest(BaseModel):
    """Login request"""
    email: str
    password: str


class SignupRequest(BaseModel):
    """Signup request"""
    email: str
    password: str
    name: str


class LoginResponse(BaseModel):
    """Backend login response"""
    access_token: str
    token_type: str = "bearer"
    user: Optional[Dict[str, Any]] = None


class CurrentUser(BaseModel):
    """User derived from a valid token"""
    id: int
    role: str
    name: Optional[str] = None
    member_id: Optional[int] = None

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "CurrentUser":
        return cls(
            id=claims.user_id,
            role=claims.role,
            name=claims.name,
            member_id=claims.member_id,
        )


class Token(BaseModel):
    """Gateway login response"""
    access_token: str
    token_type: str = "bearer"
    user: CurrentUser
