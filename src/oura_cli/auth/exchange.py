"""
Token endpoint client.

Both grant modes POST a form-encoded body and return the same TokenPair
shape. Converting ``expires_in`` to an absolute expiry is left to the
caller, so nothing here depends on a clock.
"""
import logging
from typing import Callable, Dict, Optional, Type

import aiohttp
from pydantic import ValidationError

from oura_cli.auth.exceptions import AuthError, TokenExchangeError, TokenRefreshError
from oura_cli.auth.models import TokenPair

# Configure logger
logger = logging.getLogger(__name__)


class TokenExchanger:
    """Exchanges authorization codes and refresh tokens for token pairs."""

    def __init__(
        self,
        token_url: str,
        timeout_seconds: float = 30.0,
        session_factory: Optional[Callable[[], aiohttp.ClientSession]] = None,
    ):
        """
        Initialize the token exchanger.

        Args:
            token_url: Provider token endpoint
            timeout_seconds: Total timeout for each request
            session_factory: Optional factory for the aiohttp session
        """
        self.token_url = token_url
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.session_factory = session_factory or self._default_session

    def _default_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(timeout=self.timeout)

    async def exchange_code(
        self, code: str, client_id: str, client_secret: str, redirect_uri: str
    ) -> TokenPair:
        """
        Exchange an authorization code for tokens.

        Raises:
            TokenExchangeError: If the provider rejects the exchange
        """
        logger.info("Exchanging authorization code for tokens")
        return await self._post(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
                "client_id": client_id,
                "client_secret": client_secret,
            },
            TokenExchangeError,
        )

    async def exchange_refresh(
        self, refresh_token: str, client_id: str, client_secret: str
    ) -> TokenPair:
        """
        Exchange a refresh token for a new access token.

        Raises:
            TokenRefreshError: If the provider rejects the refresh token
        """
        logger.info("Refreshing access token")
        return await self._post(
            {
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
                "client_id": client_id,
                "client_secret": client_secret,
            },
            TokenRefreshError,
        )

    async def _post(self, form: Dict[str, str], error_cls: Type[AuthError]) -> TokenPair:
        # Transport errors (aiohttp.ClientError, timeouts) propagate unchanged
        async with self.session_factory() as session:
            async with session.post(
                self.token_url,
                data=form,
                headers={"Accept": "application/json"},
            ) as response:
                body = await response.text()
                if not 200 <= response.status < 300:
                    logger.error(f"Token endpoint returned {response.status} for {form['grant_type']}")
                    raise error_cls(body, response.status)

        try:
            return TokenPair.model_validate_json(body)
        except ValidationError as e:
            logger.error(f"Malformed token endpoint response: {e}")
            raise error_cls(body, response.status) from e
