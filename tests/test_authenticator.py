"""Unit tests for session authentication."""

import asyncio
import json

import httpx
import pytest

from mindsdb_client.transport import Credentials, HttpAuthenticator


def request_json(request: httpx.Request):
    return json.loads(request.content)


class TestAuthenticate:
    """Test cases for logging in."""

    @pytest.mark.asyncio
    async def test_login_stores_session(self, fake_server, make_transport):
        transport = make_transport(fake_server)

        await transport.authenticator.authenticate(transport, "alice@example.com", "secret")

        assert transport.session == "token-1"
        login = fake_server.calls("/cloud/login")
        assert len(login) == 1
        assert login[0].method == "POST"
        assert request_json(login[0]) == {
            "email": "alice@example.com",
            "username": "alice@example.com",
            "password": "secret",
        }

    @pytest.mark.asyncio
    async def test_managed_login_endpoint(self, fake_server, make_transport):
        transport = make_transport(fake_server)

        await transport.authenticator.authenticate(transport, "admin", "secret", managed=True)

        assert len(fake_server.calls("/api/login")) == 1
        assert fake_server.calls("/cloud/login") == []
        assert transport.authenticator.credentials.managed is True

    @pytest.mark.asyncio
    async def test_failed_login_keeps_credentials(self, fake_server, make_transport):
        fake_server.login_status = 401
        transport = make_transport(fake_server)

        with pytest.raises(httpx.HTTPStatusError):
            await transport.authenticator.authenticate(transport, "alice", "wrong")

        assert transport.session is None
        assert transport.authenticator.credentials.user == "alice"

    @pytest.mark.asyncio
    async def test_login_without_session_cookie(self, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json={}))

        await transport.authenticator.authenticate(transport, "alice", "secret")

        assert transport.session is None

    def test_password_not_in_repr(self):
        authenticator = HttpAuthenticator()
        authenticator.credentials = Credentials(user="alice", password="secret")

        assert "secret" not in repr(authenticator.credentials)


class TestHandleReauthentication:
    """Test cases for renewing an expired session."""

    @pytest.mark.asyncio
    async def test_without_session_does_nothing(self, fake_server, make_transport, make_status_error):
        transport = make_transport(fake_server)

        renewed = await transport.authenticator.handle_reauthentication(
            transport, make_status_error(401)
        )

        assert renewed is False
        assert fake_server.requests == []

    @pytest.mark.asyncio
    async def test_without_error_does_nothing(self, fake_server, make_transport):
        transport = make_transport(fake_server)
        await transport.authenticator.authenticate(transport, "alice", "secret")

        assert await transport.authenticator.handle_reauthentication(transport, None) is False
        assert fake_server.login_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 500, 503])
    async def test_other_status_codes_are_ignored(
        self, fake_server, make_transport, make_status_error, status
    ):
        transport = make_transport(fake_server)
        await transport.authenticator.authenticate(transport, "alice", "secret")

        renewed = await transport.authenticator.handle_reauthentication(
            transport, make_status_error(status, session="token-1")
        )

        assert renewed is False
        assert fake_server.login_count == 1

    @pytest.mark.asyncio
    async def test_network_error_is_ignored(self, fake_server, make_transport):
        transport = make_transport(fake_server)
        await transport.authenticator.authenticate(transport, "alice", "secret")
        request = httpx.Request("POST", "http://127.0.0.1:47334/api/sql/query")

        renewed = await transport.authenticator.handle_reauthentication(
            transport, httpx.ConnectError("refused", request=request)
        )

        assert renewed is False
        assert fake_server.login_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_failure_logs_in_again(
        self, fake_server, make_transport, make_status_error, status
    ):
        transport = make_transport(fake_server)
        await transport.authenticator.authenticate(transport, "alice", "secret")

        renewed = await transport.authenticator.handle_reauthentication(
            transport, make_status_error(status, session="token-1")
        )

        assert renewed is True
        assert fake_server.login_count == 2
        assert transport.session == "token-2"
        assert request_json(fake_server.calls("/cloud/login")[-1])["password"] == "secret"

    @pytest.mark.asyncio
    async def test_stale_failure_reuses_renewed_session(
        self, fake_server, make_transport, make_status_error
    ):
        """Test a request that failed with an old session skips a second login."""
        transport = make_transport(fake_server)
        await transport.authenticator.authenticate(transport, "alice", "secret")
        await transport.authenticator.authenticate(transport, "alice", "secret")

        renewed = await transport.authenticator.handle_reauthentication(
            transport, make_status_error(401, session="token-1")
        )

        assert renewed is True
        assert fake_server.login_count == 2
        assert transport.session == "token-2"

    @pytest.mark.asyncio
    async def test_failed_relogin_raises(self, fake_server, make_transport, make_status_error):
        transport = make_transport(fake_server)
        await transport.authenticator.authenticate(transport, "alice", "secret")
        fake_server.login_status = 401

        with pytest.raises(httpx.HTTPStatusError):
            await transport.authenticator.handle_reauthentication(
                transport, make_status_error(401, session="token-1")
            )

    @pytest.mark.asyncio
    async def test_without_credentials(self, make_transport, make_status_error, fake_server):
        transport = make_transport(fake_server)
        transport.authenticator.session = "token-from-elsewhere"

        renewed = await transport.authenticator.handle_reauthentication(
            transport, make_status_error(401, session="token-from-elsewhere")
        )

        assert renewed is False
        assert fake_server.requests == []

    def test_lock_binds_to_the_running_loop(self, fake_server, make_transport, make_status_error):
        """Test an authenticator built outside any event loop serializes logins inside one."""

        async def slow_server(request):
            await asyncio.sleep(0)
            return fake_server(request)

        transport = make_transport(slow_server)
        authenticator = transport.authenticator
        assert authenticator._lock is None

        async def expire_together():
            await authenticator.authenticate(transport, "alice", "secret")
            fake_server.expire_session()
            try:
                return await asyncio.gather(
                    authenticator.handle_reauthentication(transport, make_status_error(401, "token-1")),
                    authenticator.handle_reauthentication(transport, make_status_error(401, "token-1")),
                )
            finally:
                await transport.client.aclose()

        assert asyncio.run(expire_together()) == [True, True]
        assert fake_server.login_count == 2
        assert authenticator.session == "token-2"
