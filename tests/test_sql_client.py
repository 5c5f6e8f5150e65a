"""Unit tests for the SQL REST API client."""

import json

import httpx
import pytest

from mindsdb_client.sql import QueryResult, ResultType, SqlRestApiClient
from mindsdb_client.sql.models import SqlApiResponse
from mindsdb_client.utils import MindsDbError


def sql_client(handler, make_transport) -> SqlRestApiClient:
    return SqlRestApiClient(make_transport(handler))


class TestQueryResult:
    """Test cases for response normalization."""

    def test_column_names_are_lower_cased(self):
        response = SqlApiResponse(
            column_names=["Col_A", "COL_B"],
            type="table",
            data=[[1, "x"], [2, "y"]],
        )

        result = QueryResult.from_response(response)

        assert result.column_names == ["col_a", "col_b"]
        assert result.rows == [{"col_a": 1, "col_b": "x"}, {"col_a": 2, "col_b": "y"}]
        assert result.type == ResultType.TABLE

    def test_error_result_has_no_rows(self):
        response = SqlApiResponse(
            column_names=["a"],
            type="error",
            data=[[1]],
            error_code=1,
            error_message="boom",
        )

        result = QueryResult.from_response(response)

        assert result.is_error
        assert result.rows == []
        assert result.error_message == "boom"

    def test_error_without_message(self):
        result = QueryResult.from_response(SqlApiResponse(type="error"))

        assert result.error_message == "Unknown error"

    def test_null_fields_become_empty(self):
        response = SqlApiResponse.model_validate({"type": "ok", "column_names": None, "data": None})

        result = QueryResult.from_response(response)

        assert result.column_names == []
        assert result.rows == []
        assert result.type == ResultType.OK

    def test_to_dict(self):
        result = QueryResult(column_names=["a"], rows=[{"a": 1}], type=ResultType.TABLE)

        assert result.to_dict() == {
            "column_names": ["a"],
            "rows": [{"a": 1}],
            "type": "table",
            "error_message": None,
            "context": None,
        }


class TestSqlRestApiClient:
    """Test cases for running statements over HTTP."""

    @pytest.mark.asyncio
    async def test_select_one(self, fake_server, make_transport):
        fake_server.query_payloads.append(
            {"column_names": ["x"], "type": "table", "data": [[1]]}
        )
        client = SqlRestApiClient(make_transport(fake_server))

        result = await client.run_query("SELECT 1")

        assert result.column_names == ["x"]
        assert result.rows == [{"x": 1}]
        assert result.type == ResultType.TABLE
        request = fake_server.calls("/api/sql/query")[0]
        assert request.method == "POST"
        assert json.loads(request.content) == {"query": "SELECT 1"}

    @pytest.mark.asyncio
    async def test_context_is_kept(self, fake_server, make_transport):
        fake_server.query_payloads.append(
            {"type": "ok", "context": {"db": "mindsdb"}}
        )
        client = SqlRestApiClient(make_transport(fake_server))

        result = await client.run_query("USE mindsdb")

        assert result.type == ResultType.OK
        assert result.context == {"db": "mindsdb"}

    @pytest.mark.asyncio
    async def test_statement_error_is_returned(self, fake_server, make_transport):
        fake_server.query_payloads.append(
            {"type": "error", "error_code": 0, "error_message": "Table not found"}
        )
        client = SqlRestApiClient(make_transport(fake_server))

        result = await client.run_query("SELECT * FROM nowhere")

        assert result.is_error
        assert result.error_message == "Table not found"

    @pytest.mark.asyncio
    async def test_expired_session_is_transparent(self, fake_server, make_transport):
        fake_server.require_session = True
        fake_server.query_payloads.append({"column_names": ["X"], "type": "table", "data": [[7]]})
        transport = make_transport(fake_server)
        await transport.authenticator.authenticate(transport, "alice", "secret")
        fake_server.expire_session()

        result = await SqlRestApiClient(transport).run_query("SELECT 7 AS x")

        assert result.rows == [{"x": 7}]
        assert fake_server.login_count == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, hint",
        [(404, "doesn't exist"), (500, "Something went wrong on our end")],
    )
    async def test_http_errors_are_wrapped(self, make_transport, status, hint):
        client = sql_client(lambda request: httpx.Response(status), make_transport)

        with pytest.raises(MindsDbError) as exc_info:
            await client.run_query("SELECT 1")

        assert exc_info.value.status_code == status
        assert hint in exc_info.value.message
        assert exc_info.value.url == "http://127.0.0.1:47334/api/sql/query"
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_network_error_is_wrapped(self, make_transport):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = sql_client(refuse, make_transport)

        with pytest.raises(MindsDbError, match="no response was received"):
            await client.run_query("SELECT 1")

    @pytest.mark.asyncio
    async def test_malformed_response(self, make_transport):
        client = sql_client(lambda request: httpx.Response(200, text="<html>"), make_transport)

        with pytest.raises(MindsDbError, match="Unexpected response"):
            await client.run_query("SELECT 1")

    @pytest.mark.asyncio
    async def test_unknown_result_type(self, make_transport):
        client = sql_client(
            lambda request: httpx.Response(200, json={"type": "mystery"}), make_transport
        )

        with pytest.raises(MindsDbError, match="Unexpected response"):
            await client.run_query("SELECT 1")
