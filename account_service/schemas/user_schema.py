from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class User(BaseModel):
    model_config = camel_config

    id: Optional[int] = None
    role_id: int
    name: str
    phone: str
    # bcrypt hash while stored
    password: str = Field(repr=False)
    token: Optional[str] = None
    token_expired_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserCreate(BaseModel):
    model_config = camel_config

    role_id: int
    name: str
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, repr=False)


class FindAllUsersParams(BaseModel):
    """Listing filter. Zero / empty values mean "not filtered"; ``limit=0`` disables paging."""

    model_config = camel_config

    id: int = 0
    page: int = Field(0, ge=0)
    limit: int = Field(0, ge=0)
    phone: str = ""
    name: str = ""
    token: str = ""

    @property
    def offset(self) -> int:
        return (max(self.page, 1) - 1) * self.limit
