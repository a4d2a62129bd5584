# Security helpers
# Bearer header parsing and local verification of backend-issued access tokens

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

import jwt

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header.

    Args:
        authorization: Raw header value

    Returns:
        The token, or None when the header is absent, uses another scheme or
        has no token part
    """
    if not authorization:
        return None

    parts = authorization.split(" ")
    scheme = parts[0]
    token = parts[1] if len(parts) > 1 else ""

    if not scheme or not token or scheme.lower() != "bearer":
        return None

    return token


class JWTManager:
    """
    Verifies access tokens signed by the backend's auth service.

    Only used when the project JWT secret is configured; otherwise tokens are
    validated remotely by the backend.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256",
                 audience: Optional[str] = "authenticated"):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.audience = audience

    def create_access_token(self, data: Dict[str, Any], expire_minutes: int = 60) -> str:
        """
        Create a signed access token (local tooling and tests)

        Args:
            data: Claims to encode, normally sub/email/role

        Returns:
            Encoded JWT
        """
        to_encode = data.copy()
        now = datetime.now(timezone.utc)
        to_encode.update({"exp": now + timedelta(minutes=expire_minutes), "iat": now})
        if self.audience and "aud" not in to_encode:
            to_encode["aud"] = self.audience

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify a token

        Args:
            token: Encoded JWT

        Returns:
            Decoded claims, or None when the token is invalid or expired
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Access token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.info(f"Access token rejected: {e}")
            return None
