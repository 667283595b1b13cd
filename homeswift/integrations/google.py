"""
Google OAuth 2.0 authorization-code exchange.
Trades the code sent by the frontend for tokens, then reads the Google profile.
"""

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)


class GoogleOAuthError(Exception):
    """Google rejected the exchange, or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, unreachable: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.unreachable = unreachable


class GoogleOAuthClient:
    """
    Minimal OAuth client for Google sign-in.
    The client secret is optional; public clients exchange the code without it.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: Optional[str] = None,
        token_url: str = "https://oauth2.googleapis.com/token",
        userinfo_url: str = "https://www.googleapis.com/oauth2/v2/userinfo",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    @staticmethod
    def _error_message(response: httpx.Response, default: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or default
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                return error.get("message") or default
            return body.get("error_description") or error or default
        return default

    async def exchange_code(self, code: str, redirect_uri: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for Google tokens.

        Args:
            code: Authorization code from the consent redirect
            redirect_uri: The redirect URI used to obtain the code

        Returns:
            Token response (access_token, id_token, expires_in, ...)

        Raises:
            GoogleOAuthError: If the exchange fails
        """
        form = {
            "client_id": self.client_id,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
        }
        if self.client_secret:
            form["client_secret"] = self.client_secret

        try:
            async with self._client() as client:
                response = await client.post(self.token_url, data=form)
        except httpx.HTTPError as e:
            logger.error(f"Google token endpoint unreachable: {e}")
            raise GoogleOAuthError("Google token endpoint unreachable", unreachable=True)

        if not response.is_success:
            message = self._error_message(response, "Token exchange failed")
            logger.warning(f"Google token exchange failed ({response.status_code}): {message}")
            raise GoogleOAuthError(message, status_code=response.status_code)

        return response.json()

    async def get_user_info(self, access_token: str) -> Dict[str, Any]:
        """
        Fetch the Google profile (id, email, verified_email, given_name, family_name, picture).

        Raises:
            GoogleOAuthError: If the profile cannot be read
        """
        try:
            async with self._client() as client:
                response = await client.get(
                    self.userinfo_url,
                    headers={"Authorization": f"Bearer {access_token}"}
                )
        except httpx.HTTPError as e:
            logger.error(f"Google userinfo endpoint unreachable: {e}")
            raise GoogleOAuthError("Google userinfo endpoint unreachable", unreachable=True)

        if not response.is_success:
            message = self._error_message(response, "Failed to get user info")
            logger.warning(f"Google userinfo request failed ({response.status_code}): {message}")
            raise GoogleOAuthError(message, status_code=response.status_code)

        return response.json()

    async def authenticate(self, code: str, redirect_uri: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Run the full exchange. Returns (tokens, profile)."""
        tokens = await self.exchange_code(code, redirect_uri)
        access_token = tokens.get("access_token")
        if not access_token:
            raise GoogleOAuthError("Google did not return an access token")
        profile = await self.get_user_info(access_token)
        return tokens, profile
