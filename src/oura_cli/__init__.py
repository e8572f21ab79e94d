"""
Oura CLI

A command-line client for the Oura Ring cloud API. This package provides the
OAuth2 authorization flow and the credential lifecycle that keeps an access
token usable across invocations.
"""

__version__ = "1.0.0"
__license__ = "MIT"

# Import key components for easier access
from oura_cli.config import get_settings, load_settings, Settings
from oura_cli.auth import CredentialManager, ConfigStore, AuthError
