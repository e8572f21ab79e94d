"""
Credential manager for oura-cli.

This module provides the CredentialManager class, the single entry point for
anything that needs an access token. It loads the stored credential, decides
when it is stale, drives exactly one refresh per staleness detection and
runs the first-time authorization flow.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from oura_cli.auth.clock import Clock, SystemClock
from oura_cli.auth.exceptions import NotAuthenticatedError
from oura_cli.auth.exchange import TokenExchanger
from oura_cli.auth.flow import AuthorizationFlow
from oura_cli.auth.models import Credential, mask_credential
from oura_cli.auth.store import ConfigStore

# Configure logger
logger = logging.getLogger(__name__)


@dataclass
class CredentialStatus:
    """Snapshot of the stored credential for display."""
    authenticated: bool
    client_id: str
    has_refresh_token: bool
    expires_at: Optional[datetime]
    stale: bool
    config_path: Path


class CredentialManager:
    """
    Keeps the stored credential usable across CLI invocations.

    The manager holds no credential state of its own between calls: every
    change is written back through the ConfigStore before control returns to
    the caller. It performs no retries and never falls back from a failed
    refresh to a new authorization; both are surfaced to the user.
    """

    def __init__(
        self,
        auth_settings,
        store: ConfigStore,
        exchanger: Optional[TokenExchanger] = None,
        flow: Optional[AuthorizationFlow] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the credential manager.

        Args:
            auth_settings: Authentication settings from config
            store: Persistent credential store
            exchanger: Token endpoint client (built from settings if omitted)
            flow: Browser authorization flow (built from settings if omitted)
            clock: Time source for expiry decisions
        """
        self.settings = auth_settings
        self.store = store
        self.exchanger = exchanger or TokenExchanger(
            auth_settings.token_url, auth_settings.http_timeout_seconds
        )
        self.flow = flow or AuthorizationFlow(auth_settings)
        self.clock = clock or SystemClock()
        self.expiry_skew = timedelta(seconds=auth_settings.expiry_skew_seconds)

    async def get(self) -> Credential:
        """
        Load the stored credential.

        Raises:
            NotAuthenticatedError: If no access token is on record
            ConfigStoreError: If the credential file is unreadable
        """
        credential = await asyncio.to_thread(self.store.load)
        if not credential.is_authenticated:
            raise NotAuthenticatedError()
        return credential

    def is_stale(self, credential: Credential) -> bool:
        """A credential is stale from ``expires_at - skew`` onwards."""
        if credential.expires_at is None:
            return True
        return self.clock.now() >= credential.expires_at - self.expiry_skew

    async def ensure_fresh(self, credential: Credential) -> Credential:
        """Return ``credential`` unchanged, or refreshed and saved if stale."""
        if not self.is_stale(credential):
            logger.debug("Access token still valid, skipping refresh")
            return credential
        return await self.refresh(credential)

    async def refresh(self, credential: Credential) -> Credential:
        """
        Refresh the access token unconditionally and persist the result.

        Raises:
            TokenRefreshError: If the provider rejects the refresh token
        """
        tokens = await self.exchanger.exchange_refresh(
            credential.refresh_token, credential.client_id, credential.client_secret
        )
        refreshed = credential.merge_refresh(tokens, issued_at=self.clock.now())
        await asyncio.to_thread(self.store.save, refreshed)
        logger.info(f"Token refreshed, valid until {refreshed.expires_at.isoformat()}")
        return refreshed

    async def get_valid_credential(self) -> Credential:
        """Load the stored credential and refresh it if needed."""
        return await self.ensure_fresh(await self.get())

    async def authenticate(self, client_id: str, client_secret: str) -> Credential:
        """
        Run the browser flow and store the first credential.

        Raises:
            PortUnavailableError: If the callback port is in use
            OAuthDeniedError: If the user or provider refused consent
            AuthTimeoutError: If the browser redirect never arrived
            TokenExchangeError: If the provider rejected the code
        """
        logger.info("Starting OAuth2 authentication flow")
        code = await self.flow.run(client_id)

        tokens = await self.exchanger.exchange_code(
            code, client_id, client_secret, self.flow.redirect_uri
        )
        credential = Credential.from_token_pair(
            client_id, client_secret, tokens, issued_at=self.clock.now()
        )
        await asyncio.to_thread(self.store.save, credential)

        logger.info(f"Authentication successful, tokens saved to {self.store.path}")
        return credential

    async def status(self) -> CredentialStatus:
        """Describe the stored credential without touching the network."""
        credential = await asyncio.to_thread(self.store.load)
        return CredentialStatus(
            authenticated=credential.is_authenticated,
            client_id=mask_credential(credential.client_id),
            has_refresh_token=bool(credential.refresh_token),
            expires_at=credential.expires_at,
            stale=self.is_stale(credential),
            config_path=self.store.path,
        )
