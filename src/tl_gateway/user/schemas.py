"""Pydantic request/response schemas for signup and signin.

All responses are wrapped in ApiResponse at the router layer.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.tl_common.datetime_utils import utc_today


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=11, max_length=11)
    password: str = Field(..., min_length=8, max_length=20)
    birthdate: date

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Username must not be blank")
        return v

    @field_validator("birthdate")
    @classmethod
    def birthdate_in_past(cls, v: date) -> date:
        if v >= utc_today():
            raise ValueError("Birthdate must be in the past")
        return v


class SigninRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SignupResponse(BaseModel):
    id: str
    username: str
    birthdate: date
    balance: int  # cents
    created_at: str


class SigninResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    token: str
    token_type: str = "Bearer"
    expires_in: int = 1800  # 30 minutes in seconds
