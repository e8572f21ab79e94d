"""
Authentication module for oura-cli.

This module handles the OAuth2 authorization-code flow against the Oura
cloud API, including local redirect capture, token exchange, credential
storage and refresh.
"""
from oura_cli.auth.callback import CallbackListener
from oura_cli.auth.clock import Clock, SystemClock
from oura_cli.auth.exceptions import (
    AuthError,
    AuthTimeoutError,
    ConfigStoreError,
    NotAuthenticatedError,
    OAuthDeniedError,
    PortUnavailableError,
    TokenExchangeError,
    TokenRefreshError,
)
from oura_cli.auth.exchange import TokenExchanger
from oura_cli.auth.flow import AuthorizationFlow
from oura_cli.auth.manager import CredentialManager, CredentialStatus
from oura_cli.auth.models import AuthorizationResult, Credential, TokenPair
from oura_cli.auth.store import ConfigStore

__all__ = [
    "AuthorizationFlow",
    "AuthorizationResult",
    "CallbackListener",
    "Clock",
    "ConfigStore",
    "Credential",
    "CredentialManager",
    "CredentialStatus",
    "SystemClock",
    "TokenExchanger",
    "TokenPair",
    "AuthError",
    "AuthTimeoutError",
    "ConfigStoreError",
    "NotAuthenticatedError",
    "OAuthDeniedError",
    "PortUnavailableError",
    "TokenExchangeError",
    "TokenRefreshError",
]
