"""
Single-use local HTTP listener for the OAuth redirect.

The listener serves one registered path. The first request on that path that
carries ``code`` or ``error`` resolves the result future and shuts the
listener down; it never honors a second one.
"""
import asyncio
import errno
import html
import logging
from typing import Optional

from aiohttp import web

from oura_cli.auth.exceptions import PortUnavailableError
from oura_cli.auth.models import AuthorizationResult

# Configure logger
logger = logging.getLogger(__name__)

# Windows reports a busy port as WSAEADDRINUSE
ADDRESS_IN_USE = {errno.EADDRINUSE, getattr(errno, "WSAEADDRINUSE", 10048)}

SUCCESS_PAGE = """<html>
  <body style="font-family: sans-serif; text-align: center; padding-top: 50px;">
    <h1>Authentication Successful!</h1>
    <p>You can close this window and return to the terminal.</p>
  </body>
</html>"""

FAILURE_PAGE = """<html>
  <body style="font-family: sans-serif; text-align: center; padding-top: 50px;">
    <h1>Authentication Failed</h1>
    <p>Error: {error}</p>
    <p>You can close this window.</p>
  </body>
</html>"""


class CallbackListener:
    """
    Local HTTP endpoint that captures exactly one OAuth redirect.

    Usage::

        listener = CallbackListener("localhost", 8080, "/callback")
        result_future = await listener.start()   # bound and accepting
        ...
        await listener.close()                   # idempotent
    """

    def __init__(self, host: str, port: int, path: str):
        self.host = host
        self.port = port
        self.path = path
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None
        self.result_future: Optional[asyncio.Future] = None
        self._close_task: Optional[asyncio.Task] = None

    async def start(self) -> "asyncio.Future[AuthorizationResult]":
        """
        Bind the port and start serving the callback path.

        Returns:
            Future resolved with the captured AuthorizationResult

        Raises:
            PortUnavailableError: If the port is already in use
        """
        self.result_future = asyncio.get_running_loop().create_future()

        app = web.Application()
        app.router.add_get(self.path, self._handle_callback)

        self.runner = web.AppRunner(app, access_log=None)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, self.host, self.port)
        try:
            await self.site.start()
        except OSError as e:
            await self.runner.cleanup()
            self.runner = self.site = None
            if e.errno in ADDRESS_IN_USE:
                raise PortUnavailableError(self.port, e) from e
            raise

        logger.debug(f"Callback listener started on {self.host}:{self.port}{self.path}")
        return self.result_future

    @property
    def resolved(self) -> bool:
        return self.result_future is not None and self.result_future.done()

    async def close(self) -> None:
        """Stop serving and release the port. Safe to call more than once."""
        if self.runner is None:
            return
        if self._close_task is None:
            self._close_task = asyncio.ensure_future(self._shutdown())
        await asyncio.shield(self._close_task)

    async def _shutdown(self) -> None:
        if self.site is not None:
            await self.site.stop()
        await self.runner.cleanup()
        logger.debug(f"Callback listener on port {self.port} stopped")

    def _resolve(self, result: AuthorizationResult) -> None:
        self.result_future.set_result(result)
        # Shutdown waits for this handler to finish writing its response
        if self._close_task is None:
            self._close_task = asyncio.ensure_future(self._shutdown())

    async def _handle_callback(self, request: web.Request) -> web.Response:
        """Handles the OAuth redirect."""
        try:
            if self.resolved:
                return web.Response(status=410, text="Callback already handled")

            query = request.query
            error = query.get("error")
            if error:
                logger.warning(f"OAuth callback received error: {error}")
                self._resolve(AuthorizationResult(error=error))
                return web.Response(
                    status=400,
                    text=FAILURE_PAGE.format(error=html.escape(error)),
                    content_type="text/html",
                )

            code = query.get("code")
            if code:
                logger.debug("OAuth callback received authorization code")
                self._resolve(AuthorizationResult(code=code))
                return web.Response(status=200, text=SUCCESS_PAGE, content_type="text/html")

            return web.Response(status=400, text="Missing authorization code")
        except Exception as e:
            logger.error(f"Error in OAuth callback handler: {e}", exc_info=True)
            return web.Response(status=500, text="Internal error")
