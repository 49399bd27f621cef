"""Token Issuer — stateless signed session tokens and arithmetic challenge tokens.

Invariants:
    - Nothing is stored server-side: a token verifies from its own bytes plus the secret
    - Session tokens expire issued_at + 24h; challenge tokens are valid for 5 minutes
    - Every failure (malformed, tampered, expired, wrong answer) collapses to None / False
    - MACs are compared with hmac.compare_digest

Design Decisions:
    - Two secrets, one per sub-protocol: a leaked challenge secret cannot mint sessions
    - Session token = b64url(json claims) "." b64url(HMAC-SHA256)
    - Challenge token = "<answer>:<issuedAtMs>:<hex HMAC-SHA256>", the format older
      clients already parse
    - Clock and operand source are injected so expiry is testable without sleeping
"""

import base64
import binascii
import hashlib
import hmac
import json
import re
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass

from sentinelnav.core.domain_types import (
    Role, SESSION_TTL_MS, CHALLENGE_TTL_MS, CHALLENGE_OPERAND_MAX,
)

_INT_RE = re.compile(r"^[+-]?[0-9]{1,18}$")


@dataclass(frozen=True)
class SessionClaims:
    subject: str
    role: Role
    issued_at: int
    expires_at: int


@dataclass(frozen=True)
class Challenge:
    operand_a: int
    operand_b: int
    token: str


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def _parse_int(value: object) -> int | None:
    """Integer value of a user answer; tolerates whitespace and leading zeros.

    More than 18 digits is never a valid answer or timestamp and yields None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _INT_RE.match(text):
        return None
    return int(text)


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class TokenIssuer:
    """Issues and verifies session and challenge tokens."""

    def __init__(
        self,
        session_secret: str,
        challenge_secret: str,
        clock: Callable[[], int] = _wall_clock_ms,
        session_ttl_ms: int = SESSION_TTL_MS,
        challenge_ttl_ms: int = CHALLENGE_TTL_MS,
        randbelow: Callable[[int], int] = secrets.randbelow,
    ):
        self._session_key = session_secret.encode("utf-8")
        self._challenge_key = challenge_secret.encode("utf-8")
        self._clock = clock
        self.session_ttl_ms = session_ttl_ms
        self.challenge_ttl_ms = challenge_ttl_ms
        self._randbelow = randbelow

    # ─── Session tokens ──────────────────────────────────────────

    def issue_session(self, subject: str, role: Role = Role.ADMIN) -> str:
        now = self._clock()
        claims = {
            "sub": subject,
            "role": Role(role).value,
            "iat": now,
            "exp": now + self.session_ttl_ms,
        }
        payload = _b64encode(
            json.dumps(claims, separators=(",", ":"), sort_keys=True).encode("utf-8"),
        )
        return f"{payload}.{_b64encode(self._session_mac(payload))}"

    def verify_session(self, token: object) -> SessionClaims | None:
        """Claims of a valid, unexpired token; None otherwise."""
        if not isinstance(token, str) or token.count(".") != 1:
            return None
        payload, signature = token.split(".")
        try:
            given = _b64decode(signature)
            claims = json.loads(_b64decode(payload))
        except (binascii.Error, ValueError, RecursionError):
            return None
        signature_ok = hmac.compare_digest(given, self._session_mac(payload))
        try:
            parsed = SessionClaims(
                subject=str(claims["sub"]),
                role=Role(claims["role"]),
                issued_at=int(claims["iat"]),
                expires_at=int(claims["exp"]),
            )
        except (KeyError, TypeError, ValueError, OverflowError):
            return None
        not_expired = self._clock() <= parsed.expires_at
        if signature_ok and not_expired:
            return parsed
        return None

    def _session_mac(self, payload: str) -> bytes:
        return hmac.new(
            self._session_key, payload.encode("ascii"), hashlib.sha256,
        ).digest()

    # ─── Challenge tokens ────────────────────────────────────────

    def issue_challenge(self) -> Challenge:
        operand_a = self._randbelow(CHALLENGE_OPERAND_MAX + 1)
        operand_b = self._randbelow(CHALLENGE_OPERAND_MAX + 1)
        answer = operand_a + operand_b
        data = f"{answer}:{self._clock()}"
        return Challenge(
            operand_a=operand_a,
            operand_b=operand_b,
            token=f"{data}:{self._challenge_mac(data)}",
        )

    def verify_challenge(self, token: object, answer: object) -> bool:
        if not isinstance(token, str):
            return False
        parts = token.split(":")
        if len(parts) != 3 or not all(parts):
            return False
        answer_text, issued_text, signature = parts
        expected_answer = _parse_int(answer_text)
        issued_at = _parse_int(issued_text)
        if expected_answer is None or issued_at is None:
            return False

        data = f"{answer_text}:{issued_text}"
        signature_ok = hmac.compare_digest(
            signature.encode("ascii", "replace"),
            self._challenge_mac(data).encode("ascii"),
        )
        fresh = self._clock() - issued_at <= self.challenge_ttl_ms
        correct = _parse_int(answer) == expected_answer
        return signature_ok and fresh and correct

    def _challenge_mac(self, data: str) -> str:
        return hmac.new(
            self._challenge_key, data.encode("utf-8"), hashlib.sha256,
        ).hexdigest()
