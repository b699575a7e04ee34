# credential_gate/models.py
from http import HTTPStatus
from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_REALM_MESSAGE = "Protected"
DEFAULT_REJECTION_MESSAGE = HTTPStatus.UNAUTHORIZED.phrase

# Trimmed from header values, which arrive latin-1 decoded from raw bytes
HEADER_WHITESPACE = " \t\n\v\f\r"
# Trimmed from configured strings: ASCII whitespace plus NEL and NBSP
CONFIG_WHITESPACE = HEADER_WHITESPACE + "\x85\xa0"


def is_blank(value: str) -> bool:
    return not value.strip(CONFIG_WHITESPACE)


class GateConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    password: str
    realm_message: str = DEFAULT_REALM_MESSAGE
    rejection_message: str = DEFAULT_REJECTION_MESSAGE

    @field_validator('username', 'password')
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if is_blank(v):
            raise ValueError("username and/or password are empty")
        return v

    @field_validator('realm_message', mode='before')
    @classmethod
    def default_blank_realm(cls, v):
        if v is None or (isinstance(v, str) and is_blank(v)):
            return DEFAULT_REALM_MESSAGE
        return v

    @field_validator('rejection_message', mode='before')
    @classmethod
    def default_blank_rejection(cls, v):
        if v is None or (isinstance(v, str) and is_blank(v)):
            return DEFAULT_REJECTION_MESSAGE
        return v

    @property
    def challenge(self) -> str:
        # Realm is interpolated verbatim, embedded quotes are not escaped
        return f'Basic realm="{self.realm_message}"'


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: bytes = Field(repr=False)
    password: bytes = Field(repr=False)


class Allow(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str


class Reject(BaseModel):
    model_config = ConfigDict(frozen=True)

    status_code: int = HTTPStatus.UNAUTHORIZED.value
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = DEFAULT_REJECTION_MESSAGE


Decision = Union[Allow, Reject]
