"""Administrator Login — exchanges challenge + credentials for a session token.

Invariants:
    - The challenge is verified before credentials are looked at
    - Unknown user, wrong password and unset password hash share one error message
    - Passwords are only ever compared against a werkzeug hash
"""

import hmac
import logging

from werkzeug.security import check_password_hash

from sentinelnav.core.domain_types import Role
from sentinelnav.core.errors import InvalidTokenError, UnauthorizedError
from sentinelnav.core.tokens import TokenIssuer

logger = logging.getLogger(__name__)


def _credentials_match(
    username: str, password: str, admin_username: str, admin_password_hash: str,
) -> bool:
    if not admin_password_hash:
        return False
    user_ok = hmac.compare_digest(username.encode(), admin_username.encode())
    password_ok = check_password_hash(admin_password_hash, password)
    return user_ok and password_ok


def login(
    issuer: TokenIssuer,
    *,
    username: str,
    password: str,
    captcha_token: str,
    captcha_answer: str | int,
    admin_username: str,
    admin_password_hash: str,
) -> str:
    """Return a fresh session token or raise."""
    if not issuer.verify_challenge(captcha_token, captcha_answer):
        logger.warning("Login rejected: challenge failed")
        raise InvalidTokenError("INVALID_CHALLENGE", "Invalid captcha")

    if not _credentials_match(username, password, admin_username, admin_password_hash):
        logger.warning("Login rejected: bad credentials")
        raise UnauthorizedError("Invalid credentials")

    logger.info("Administrator logged in")
    return issuer.issue_session(username, Role.ADMIN)
