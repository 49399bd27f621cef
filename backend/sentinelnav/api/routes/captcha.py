"""Captcha Routes — issue and verify arithmetic challenges."""

from fastapi import APIRouter, Depends

from sentinelnav.api.dependencies import get_token_issuer
from sentinelnav.core.tokens import TokenIssuer
from sentinelnav.schemas.auth import ChallengeResponse, ChallengeVerdict, ChallengeVerify

router = APIRouter(prefix="/api/v1/captcha", tags=["captcha"])


@router.get("", response_model=ChallengeResponse)
async def issue_challenge(issuer: TokenIssuer = Depends(get_token_issuer)):
    challenge = issuer.issue_challenge()
    return ChallengeResponse(
        operand_a=challenge.operand_a,
        operand_b=challenge.operand_b,
        token=challenge.token,
    )


@router.post("/verify", response_model=ChallengeVerdict)
async def verify_challenge(
    body: ChallengeVerify, issuer: TokenIssuer = Depends(get_token_issuer),
):
    return ChallengeVerdict(valid=issuer.verify_challenge(body.token, body.answer))
