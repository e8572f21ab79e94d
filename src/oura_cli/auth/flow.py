"""
Browser-based OAuth2 authorization flow.

This module hands the user off to the provider's consent screen and waits for
the redirect on the local callback listener, racing it against a timeout.
"""
import asyncio
import logging
import webbrowser
from typing import Callable, Optional
from urllib.parse import urlencode

from rich.console import Console
from rich.markup import escape as rich_escape
from rich.panel import Panel

from oura_cli.auth.callback import CallbackListener
from oura_cli.auth.exceptions import AuthTimeoutError, OAuthDeniedError

# Configure logger
logger = logging.getLogger(__name__)


class AuthorizationFlow:
    """
    Produces a single authorization code for a client ID.

    The listener is started before anything else, so a busy port fails the
    flow before any browser is opened. The listener is closed exactly once,
    in one place, however the wait ends (cancellation included).
    """

    def __init__(
        self,
        auth_settings,
        open_browser: Callable[[str], bool] = webbrowser.open,
        console: Optional[Console] = None,
    ):
        """
        Initialize the authorization flow.

        Args:
            auth_settings: Authentication settings from config
            open_browser: Best-effort browser launcher; failures are non-fatal
            console: Rich console for user-facing instructions
        """
        self.settings = auth_settings
        self.open_browser = open_browser
        self.console = console or Console(stderr=True)

    @property
    def redirect_uri(self) -> str:
        return self.settings.redirect_uri

    def build_authorization_url(self, client_id: str) -> str:
        """Compose the consent screen URL, requesting every supported scope."""
        params = {
            "response_type": "code",
            "client_id": client_id,
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(self.settings.scopes),
        }
        return f"{self.settings.authorize_url}?{urlencode(params)}"

    def create_listener(self) -> CallbackListener:
        return CallbackListener(
            self.settings.redirect_host,
            self.settings.redirect_port,
            self.settings.redirect_path,
        )

    async def run(self, client_id: str) -> str:
        """
        Run the flow and return the authorization code.

        Raises:
            PortUnavailableError: If the callback port is in use
            OAuthDeniedError: If the provider redirected back with an error
            AuthTimeoutError: If no redirect arrived before the timeout
        """
        auth_url = self.build_authorization_url(client_id)
        listener = self.create_listener()

        # PortUnavailableError propagates before the browser is touched
        result_future = await listener.start()
        try:
            self._hand_off(auth_url)

            timeout = self.settings.callback_timeout_seconds
            done, _ = await asyncio.wait({result_future}, timeout=timeout)
            if not done:
                logger.warning(f"No OAuth callback received within {timeout:g} seconds")
                raise AuthTimeoutError(timeout)

            result = result_future.result()
            if not result.ok:
                raise OAuthDeniedError(result.error)

            logger.info("Received authorization code")
            return result.code
        finally:
            await listener.close()

    def _hand_off(self, auth_url: str) -> None:
        """Show the URL and try to open it in the default browser."""
        self.console.print(
            Panel(
                "Opening browser for authentication...\n"
                "If the browser doesn't open, visit the URL below.",
                title="Oura Authentication",
                style="bold blue",
            )
        )
        self.console.print(f"[bold]URL:[/bold] [link={auth_url}]{rich_escape(auth_url)}[/link]\n")

        try:
            opened = self.open_browser(auth_url)
        except Exception as e:
            logger.warning(f"Failed to open browser: {e}")
            opened = False

        if not opened:
            self.console.print(
                "[yellow]Could not open browser automatically.[/yellow] "
                "Please copy and paste the URL above into your browser."
            )
