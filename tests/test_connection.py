"""Unit tests for connecting to MindsDB."""

import json

import httpx
import pytest

import mindsdb_client
from mindsdb_client import Connection, connect
from mindsdb_client.utils import AuthenticationError, ConfigurationError


CLOUD_HOST = "https://cloud.mindsdb.com"
LOCAL_HOST = "http://127.0.0.1:47334"


def mock_client(handler, base_url: str) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)


class TestConnect:
    """Test cases for connect()."""

    @pytest.mark.asyncio
    async def test_cloud_connection_logs_in(self, clean_settings, fake_server):
        client = mock_client(fake_server, CLOUD_HOST)

        connection = await connect(user="alice@example.com", password="secret", http_client=client)

        assert connection.host == CLOUD_HOST
        assert connection.is_authenticated
        login = fake_server.calls("/cloud/login")
        assert len(login) == 1
        assert json.loads(login[0].content)["email"] == "alice@example.com"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_managed_connection_uses_api_login(self, clean_settings, fake_server):
        client = mock_client(fake_server, "http://mindsdb.internal:47334")

        connection = await connect(
            user="admin", password="secret", managed=True, http_client=client
        )

        assert connection.is_authenticated
        assert len(fake_server.calls("/api/login")) == 1
        await client.aclose()

    @pytest.mark.asyncio
    async def test_local_connection_skips_login(self, clean_settings, fake_server):
        client = mock_client(fake_server, LOCAL_HOST)

        connection = await connect(http_client=client)
        await connection.run_query("SELECT 1")

        assert not connection.is_authenticated
        assert fake_server.login_count == 0
        assert "cookie" not in fake_server.calls("/api/sql/query")[0].headers
        await client.aclose()

    @pytest.mark.asyncio
    async def test_host_argument(self, clean_settings, fake_server):
        client = mock_client(fake_server, LOCAL_HOST)

        connection = await connect(host="http://localhost:47334/", http_client=client)

        assert connection.host == "http://localhost:47334"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_credentials_from_settings(self, clean_settings, monkeypatch, fake_server):
        monkeypatch.setenv("MINDSDB_USER", "env-user")
        monkeypatch.setenv("MINDSDB_PASSWORD", "env-secret")
        clean_settings.reload()
        client = mock_client(fake_server, CLOUD_HOST)

        await connect(http_client=client)

        body = json.loads(fake_server.calls("/cloud/login")[0].content)
        assert body == {"email": "env-user", "username": "env-user", "password": "env-secret"}
        await client.aclose()

    @pytest.mark.asyncio
    async def test_missing_credentials(self, clean_settings, fake_server):
        client = mock_client(fake_server, CLOUD_HOST)

        with pytest.raises(ConfigurationError, match="user and password are required"):
            await connect(http_client=client)

        assert fake_server.requests == []
        await client.aclose()

    @pytest.mark.asyncio
    async def test_failed_login(self, clean_settings, fake_server):
        fake_server.login_status = 401
        client = mock_client(fake_server, CLOUD_HOST)

        with pytest.raises(AuthenticationError) as exc_info:
            await connect(user="alice", password="wrong", http_client=client)

        assert exc_info.value.status_code == 401
        assert exc_info.value.url == f"{CLOUD_HOST}/cloud/login"
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)
        await client.aclose()


class TestConnection:
    """Test cases for an open connection."""

    def test_resource_clients_share_sql_client(self, make_transport, fake_server):
        connection = Connection(make_transport(fake_server))

        for client in (
            connection.databases,
            connection.projects,
            connection.tables,
            connection.views,
            connection.models,
            connection.jobs,
            connection.ml_engines,
            connection.knowledge_bases,
        ):
            assert client.sql_client is connection.sql

    def test_rest_clients_share_transport(self, make_transport, fake_server):
        transport = make_transport(fake_server)
        connection = Connection(transport)

        for client in (
            connection.projects,
            connection.knowledge_bases,
            connection.agents,
            connection.skills,
            connection.callbacks,
        ):
            assert client.transport is transport

    @pytest.mark.asyncio
    async def test_end_to_end_statement(self, make_transport, fake_server):
        fake_server.query_payloads.append(
            {"column_names": ["DATABASE", "TYPE", "ENGINE"], "type": "table",
             "data": [["mindsdb", "project", None]]}
        )
        connection = Connection(make_transport(fake_server))

        databases = await connection.databases.list_databases()

        assert [d.name for d in databases] == ["mindsdb"]
        body = json.loads(fake_server.calls("/api/sql/query")[0].content)
        assert body == {"query": "SHOW FULL DATABASES"}

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_client(self, clean_settings):
        async with await connect(host=LOCAL_HOST) as connection:
            client = connection.transport.client

        assert client.is_closed

    def test_repr(self, make_transport, fake_server):
        connection = Connection(make_transport(fake_server))

        assert repr(connection) == "Connection(host='http://127.0.0.1:47334', authenticated=False)"

    def test_package_exports(self):
        assert mindsdb_client.__version__ == "1.0.0"
        assert "connect" in mindsdb_client.__all__
