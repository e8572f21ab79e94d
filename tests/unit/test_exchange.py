"""
Unit tests for the token endpoint client
"""
import aiohttp
import pytest
from aiohttp.test_utils import unused_port

from oura_cli.auth.exceptions import TokenExchangeError, TokenRefreshError
from oura_cli.auth.exchange import TokenExchanger

TOKENS = {"access_token": "T", "refresh_token": "R", "expires_in": 3600, "token_type": "Bearer"}


@pytest.mark.asyncio
async def test_exchange_code_posts_form(token_endpoint):
    token_endpoint.respond(200, TOKENS)
    exchanger = TokenExchanger(token_endpoint.url)

    tokens = await exchanger.exchange_code("abc123", "client", "secret", "http://localhost:8080/callback")

    assert token_endpoint.requests == [
        {
            "grant_type": "authorization_code",
            "code": "abc123",
            "redirect_uri": "http://localhost:8080/callback",
            "client_id": "client",
            "client_secret": "secret",
        }
    ]
    assert tokens.access_token == "T"
    assert tokens.refresh_token == "R"
    assert tokens.expires_in == 3600
    assert tokens.token_type == "Bearer"


@pytest.mark.asyncio
async def test_exchange_code_failure_keeps_provider_text(token_endpoint):
    token_endpoint.respond(400, '{"error": "invalid_grant", "error_description": "Code expired"}')
    exchanger = TokenExchanger(token_endpoint.url)

    with pytest.raises(TokenExchangeError) as exc_info:
        await exchanger.exchange_code("stale", "client", "secret", "http://localhost:8080/callback")

    assert exc_info.value.status == 400
    assert exc_info.value.body == '{"error": "invalid_grant", "error_description": "Code expired"}'
    assert "Code expired" in str(exc_info.value)


@pytest.mark.asyncio
async def test_exchange_refresh_posts_form(token_endpoint):
    token_endpoint.respond(200, {"access_token": "T2", "expires_in": 86400})
    exchanger = TokenExchanger(token_endpoint.url)

    tokens = await exchanger.exchange_refresh("R", "client", "secret")

    assert token_endpoint.requests == [
        {
            "grant_type": "refresh_token",
            "refresh_token": "R",
            "client_id": "client",
            "client_secret": "secret",
        }
    ]
    assert tokens.access_token == "T2"
    assert tokens.refresh_token is None


@pytest.mark.asyncio
async def test_exchange_refresh_failure_asks_for_reauth(token_endpoint):
    token_endpoint.respond(401, "refresh token revoked")
    exchanger = TokenExchanger(token_endpoint.url)

    with pytest.raises(TokenRefreshError) as exc_info:
        await exchanger.exchange_refresh("revoked", "client", "secret")

    assert exc_info.value.body == "refresh token revoked"
    assert exc_info.value.status == 401
    assert "oura auth" in exc_info.value.message


@pytest.mark.asyncio
async def test_malformed_success_body_is_an_exchange_error(token_endpoint):
    token_endpoint.respond(200, "<html>maintenance</html>")
    exchanger = TokenExchanger(token_endpoint.url)

    with pytest.raises(TokenExchangeError) as exc_info:
        await exchanger.exchange_code("abc123", "client", "secret", "http://localhost:8080/callback")

    assert exc_info.value.body == "<html>maintenance</html>"


@pytest.mark.asyncio
async def test_transport_errors_propagate():
    exchanger = TokenExchanger(f"http://127.0.0.1:{unused_port()}/oauth/token", timeout_seconds=2)

    with pytest.raises(aiohttp.ClientError):
        await exchanger.exchange_refresh("R", "client", "secret")
