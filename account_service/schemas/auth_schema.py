from typing import Any, Optional

from pydantic import BaseModel

from account_service.schemas.user_schema import camel_config


class LoginResponse(BaseModel):
    model_config = camel_config

    session_id: str
    claims: dict[str, Any]


class ClaimsOut(BaseModel):
    model_config = camel_config

    exp: Optional[int] = None
    iat: Optional[int] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    role_id: Optional[int] = None
    timestamp: Optional[str] = None


class AuthorizationOut(BaseModel):
    model_config = camel_config

    session_id: Optional[str] = None
    claims: ClaimsOut
