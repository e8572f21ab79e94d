"""
Custom exceptions for the authentication module.

This module defines exceptions that can be raised during the OAuth
authorization flow, token exchange, token refresh and credential storage.
Every exception is terminal for the operation that raised it.
"""
from typing import Optional


REAUTH_HINT = "Please re-authenticate with 'oura auth'."


class AuthError(Exception):
    """Base exception class for authentication errors."""

    def __init__(self, message: str = "Authentication error occurred"):
        self.message = message
        super().__init__(self.message)


class PortUnavailableError(AuthError):
    """Raised when the local callback listener cannot bind its port."""

    def __init__(self, port: int, original_error=None):
        message = (
            f"Port {port} is already in use. "
            "Please close other applications using this port."
        )
        super().__init__(message)
        self.port = port
        self.original_error = original_error


class OAuthDeniedError(AuthError):
    """Raised when the provider redirects back with an error code."""

    def __init__(self, error: str):
        super().__init__(f"OAuth error: {error}")
        self.error = error


class AuthTimeoutError(AuthError):
    """Raised when no callback arrives before the authorization timeout."""

    def __init__(self, timeout_seconds: float):
        minutes = timeout_seconds / 60
        super().__init__(f"Authentication timed out after {minutes:g} minutes")
        self.timeout_seconds = timeout_seconds


class TokenExchangeError(AuthError):
    """Raised when the token endpoint rejects an authorization code."""

    def __init__(self, body: str, status: Optional[int] = None):
        super().__init__(f"Failed to exchange code for tokens: {body}")
        self.status = status
        self.body = body


class TokenRefreshError(AuthError):
    """Raised when the token endpoint rejects a refresh token."""

    def __init__(self, body: str, status: Optional[int] = None):
        super().__init__(f"Failed to refresh token: {body}. {REAUTH_HINT}")
        self.status = status
        self.body = body


class NotAuthenticatedError(AuthError):
    """Raised when no access token is on record."""

    def __init__(self, message: str = "Not authenticated. Please run 'oura auth' first to authenticate."):
        super().__init__(message)


class ConfigStoreError(AuthError):
    """Raised when there's an error reading or writing the credential file."""

    def __init__(self, message: str = "Credential storage error", original_error=None):
        super().__init__(message)
        self.original_error = original_error
