import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from traveladvisor.core.clerk_auth import clerk_auth
from traveladvisor.core.schemas import Identity
from traveladvisor.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> Identity:
    """
    Dependency resolving the caller from a Clerk session token.

    Raises HTTP 401 when the token is missing or cannot be verified.
    """
    if not credentials:
        raise _unauthorized()

    claims = await clerk_auth.verify_clerk_token(credentials.credentials)
    if not claims or not claims.get("sub"):
        logger.warning("[Auth] Token verification returned no subject")
        raise _unauthorized()

    return Identity(user_id=claims["sub"], email=claims.get("email"))
    try:
        return await get_current_identity(credentials)
    except HTTPException:
        return None


def is_admin(identity: Identity, settings: Settings) -> bool:
    """Admin when listed by id or email. With no admin configured, nobody is."""
    if identity.user_id in settings.admin_user_ids:
        return True
    if identity.email and settings.admin_emails:
        allowed = {email.lower() for email in settings.admin_emails}
        return identity.email.lower() in allowed
    return False


async def require_admin(
    identity: Identity = Depends(get_current_identity),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """
    Dependency for admin-only routes.

    The session token does not always carry an email, so it is looked up
    from Clerk before checking ADMIN_EMAILS. Raises HTTP 403 for non-admins.
    """
    if not identity.email and settings.admin_emails:
        email = await clerk_auth.get_primary_email(identity.user_id)
        if email:
            identity = identity.model_copy(update={"email": email})

    if not is_admin(identity, settings):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return identity
