"""Tests for the request executor."""

import aiohttp
import pytest
from loguru import logger

from forgejo_import.api.exceptions import RequestTimeoutError, TransportError
from forgejo_import.api.executor import APIResponse, RequestExecutor
from forgejo_import.api.rate_limiter import RateLimiter

from fakes import FakeResponse, FakeSession


def make_executor(session, timeout=None):
    return RequestExecutor(
        headers={'Authorization': 'token abc', 'User-Agent': 'test'},
        rate_limiter=RateLimiter(100, 1.0),
        timeout=timeout,
        session=session,
    )


class TestAPIResponse:
    """Test API response model."""

    def test_data_parses_json(self):
        """JSON bodies are decoded on demand."""
        response = APIResponse(
            status_code=200,
            headers={'Content-Type': 'application/json'},
            content=b'{"id": 1, "name": "test"}',
            success=True,
        )

        assert response.data() == {'id': 1, 'name': 'test'}
        assert response.text == '{"id": 1, "name": "test"}'

    def test_empty_body(self):
        """An empty body decodes to None."""
        response = APIResponse(status_code=204, headers={}, success=True)

        assert response.data() is None


class TestRequestExecutor:
    """Test request execution."""

    @pytest.mark.asyncio
    async def test_execute_returns_any_status(self):
        """The executor does not judge status codes."""
        session = FakeSession(FakeResponse(status=500, body=b'boom'))
        executor = make_executor(session)

        response = await executor.execute('GET', 'https://example.com/x')

        assert response.status_code == 500
        assert response.success is False
        assert response.text == 'boom'

    @pytest.mark.asyncio
    async def test_execute_sends_fixed_headers(self):
        """Every request carries the headers given at construction."""
        session = FakeSession(FakeResponse(json_body={}), FakeResponse(json_body={}))
        executor = make_executor(session)

        await executor.execute('GET', 'https://example.com/a')
        await executor.execute('POST', 'https://example.com/b', json={'k': 'v'})

        for request in session.requests:
            assert request.kwargs['headers']['Authorization'] == 'token abc'
            assert request.kwargs['headers']['User-Agent'] == 'test'
        assert session.requests[1].kwargs['json'] == {'k': 'v'}

    def test_headers_are_read_only(self):
        """Headers cannot be changed after construction."""
        executor = make_executor(FakeSession())

        with pytest.raises(TypeError):
            executor.headers['Authorization'] = 'token other'

    @pytest.mark.asyncio
    async def test_timeout_is_distinct_failure(self):
        """A request exceeding the ceiling raises RequestTimeoutError."""
        session = FakeSession(FakeResponse(json_body={}, delay=1.0))
        executor = make_executor(session, timeout=0.05)

        with pytest.raises(RequestTimeoutError) as exc_info:
            await executor.execute('POST', 'https://example.com/repos/migrate')

        assert exc_info.value.timeout == 0.05

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Connection failures raise TransportError, not a timeout."""
        session = FakeSession(aiohttp.ClientConnectionError('refused'))
        executor = make_executor(session)

        with pytest.raises(TransportError) as exc_info:
            await executor.execute('GET', 'https://example.com/x')

        assert not isinstance(exc_info.value, RequestTimeoutError)

    @pytest.mark.asyncio
    async def test_close_leaves_injected_session_open(self):
        """A session passed in by the caller is not closed by the executor."""
        session = FakeSession()
        executor = make_executor(session)

        await executor.close()

        assert session.closed is False

    @pytest.mark.asyncio
    async def test_throttled_request_logs_wait(self):
        """A request held back by the rate limiter is logged before it waits."""
        session = FakeSession(FakeResponse(json_body={}), FakeResponse(json_body={}))
        executor = RequestExecutor(
            headers={}, rate_limiter=RateLimiter(1, 0.1), session=session
        )
        messages = []
        sink_id = logger.add(messages.append, level='DEBUG', format='{message}')

        try:
            await executor.execute('GET', 'https://example.com/a')
            await executor.execute('GET', 'https://example.com/b')
        finally:
            logger.remove(sink_id)

        waits = [m for m in messages if m.startswith('Rate limit reached')]
        assert len(waits) == 1
        assert 'GET https://example.com/b' in waits[0]
        assert len(session.requests) == 2
