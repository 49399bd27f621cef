"""Auth Schemas — login, session info and arithmetic challenges.

Design Decisions:
    - Challenge answers accepted as string or number: clients send either
"""

from typing import Annotated

from pydantic import Field

from sentinelnav.core.domain_types import Role
from sentinelnav.schemas.base import CamelModel

ChallengeAnswer = (
    Annotated[str, Field(max_length=32)]
    | Annotated[int, Field(ge=-10**18, le=10**18)]
)


class LoginRequest(CamelModel):
    username: str = Field(max_length=200)
    password: str = Field(max_length=1000)
    captcha_token: str = Field(max_length=512)
    captcha_answer: ChallengeAnswer


class ChallengeResponse(CamelModel):
    operand_a: int
    operand_b: int
    token: str


class ChallengeVerify(CamelModel):
    token: str = Field(max_length=512)
    answer: ChallengeAnswer


class ChallengeVerdict(CamelModel):
    valid: bool


class SessionUser(CamelModel):
    username: str
    role: Role


class MeResponse(CamelModel):
    user: SessionUser
