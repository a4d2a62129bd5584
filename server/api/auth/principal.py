# Principal resolution
# Turns a bearer token into an AuthenticatedPrincipal, locally or via the auth service

import logging
from typing import Optional

from .models import AuthenticatedPrincipal
from db.backend import BackendClient, BackendError, BackendUnavailableError
from db.query_operations import QueryOperations
from utils.config import BackendSettings, Config
from utils.security import JWTManager

logger = logging.getLogger(__name__)

config = Config()

# Statuses the auth service uses for a token it does not accept
REJECTED_TOKEN_STATUSES = (400, 401, 403, 404)


def _verify_locally(token: str, secret: str) -> Optional[AuthenticatedPrincipal]:
    jwt_manager = JWTManager(
        secret_key=secret,
        algorithm=config.get("auth.jwt_algorithm", "HS256"),
        audience=config.get("auth.jwt_audience", "authenticated"),
    )
    claims = jwt_manager.verify_token(token)
    if not claims:
        return None

    return AuthenticatedPrincipal(
        user_id=str(claims["sub"]),
        email=claims.get("email"),
        role=claims.get("role"),
        access_token=token,
    )


async def resolve_principal(token: str, settings: BackendSettings) -> Optional[AuthenticatedPrincipal]:
    """
    Resolve the caller behind a bearer token.

    With a configured JWT secret the token is verified locally; otherwise the
    backend auth service is asked.

    Args:
        token: Bearer token
        settings: Configured backend settings

    Returns:
        The principal, or None when the token is rejected

    Raises:
        BackendError: the auth service could not be reached or failed
    """
    if settings.jwt_secret:
        return _verify_locally(token, settings.jwt_secret)

    backend = BackendClient(settings.origin, settings.anon_key, access_token=token,
                            timeout=settings.timeout_seconds)
    try:
        user = await backend.get_user(token)
    except BackendUnavailableError:
        raise
    except BackendError as e:
        if e.status in REJECTED_TOKEN_STATUSES:
            logger.info(f"Auth service rejected token: {e.code} {e.message}")
            return None
        raise

    return AuthenticatedPrincipal(
        user_id=str(user["id"]),
        email=user.get("email"),
        role=user.get("role"),
        access_token=token,
    )


async def load_staff_role(principal: AuthenticatedPrincipal, settings: BackendSettings) -> str:
    """profiles.role of the principal, read with the caller's own token"""
    backend = BackendClient(settings.origin, settings.anon_key, access_token=principal.access_token,
                            timeout=settings.timeout_seconds)
    return await QueryOperations(backend).get_role(principal.user_id)
