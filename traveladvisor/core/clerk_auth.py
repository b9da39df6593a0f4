import logging
from typing import Any

import httpx
from jose import JWTError, jwk, jwt

from traveladvisor.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)

CLERK_API_URL = "https://api.clerk.com/v1"


class ClerkAuth:
    """Clerk session-token verification and user lookups."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings
        self._jwks_cache: dict[str, Any] | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _jwks_url(self) -> str | None:
        if self.settings.clerk_jwks_url:
            return self.settings.clerk_jwks_url
        if self.settings.clerk_instance_url:
            return f"{self.settings.clerk_instance_url.rstrip('/')}/.well-known/jwks.json"
        return None

    async def _get_clerk_jwks(self) -> dict[str, Any] | None:
        """
        Fetch Clerk's JWKS (JSON Web Key Set) for JWT verification.

        Returns:
            JWKS dictionary with public keys, or None when no JWKS URL is
            configured or the fetch fails
        """
        if self._jwks_cache:
            return self._jwks_cache

        jwks_url = self._jwks_url()
        if not jwks_url:
            logger.debug("[Auth] No CLERK_JWKS_URL or CLERK_INSTANCE_URL set")
            return None

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(jwks_url, timeout=5.0)
        except httpx.HTTPError as e:
            logger.error(f"[Auth] Error fetching JWKS: {e}")
            return None

        if response.status_code != 200:
            logger.error(f"[Auth] Failed to fetch JWKS: {response.status_code}")
            return None
        self._jwks_cache = response.json()
        return self._jwks_cache

    async def verify_clerk_token(self, token: str) -> dict[str, Any] | None:
        """
        Verify a Clerk JWT and return its claims.

        Signatures are checked against the instance JWKS (RS256). Only in
        development, when no matching key is available, the token is decoded
        without verification.

        Args:
            token: The Clerk JWT, with or without a "Bearer " prefix

        Returns:
            Claims dict if valid, None if invalid
        """
        if token.startswith("Bearer "):
            token = token[7:]

        try:
            kid = jwt.get_unverified_header(token).get("kid")
        except JWTError as e:
            logger.warning(f"[Auth] Malformed token: {e}")
            return None

        jwks = await self._get_clerk_jwks()
        key = None
        if jwks and kid:
            key = next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)

        if key:
            try:
                return jwt.decode(
                    token,
                    jwk.construct(key),
                    algorithms=["RS256"],
                    options={"verify_aud": False},
                )
            except JWTError as e:
                logger.warning(f"[Auth] JWT verification failed: {e}")
                return None

        if self.settings.is_development:
            logger.debug("[Auth] Development mode: decoding without signature verification")
            try:
                return jwt.get_unverified_claims(token)
            except JWTError as e:
                logger.warning(f"[Auth] Could not decode token: {e}")
                return None

        logger.error("[Auth] Signature verification required but no signing key available")
        return None

    async def get_primary_email(self, user_id: str) -> str | None:
        """Primary email address of a Clerk user via the backend API."""
        if not self.settings.clerk_secret_key:
            return None
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{CLERK_API_URL}/users/{user_id}",
                    headers={"Authorization": f"Bearer {self.settings.clerk_secret_key}"},
                    timeout=10.0,
                )
        except httpx.HTTPError as e:
            logger.error(f"[Auth] Error fetching user from Clerk: {e}")
            return None

        if response.status_code != 200:
            logger.error(f"[Auth] Clerk API error: {response.status_code} - {response.text}")
            return None

        data = response.json()
        addresses = data.get("email_addresses") or []
        primary_id = data.get("primary_email_address_id")
        for address in addresses:
            if address.get("id") == primary_id:
                return address.get("email_address")
        return addresses[0].get("email_address") if addresses else None


clerk_auth = ClerkAuth()
