"""Unit tests for the remove.bg client."""

import random

import pytest
from unittest.mock import Mock

from bg_removal_pipeline.clients.removebg import RemoveBgClient, compute_backoff
from bg_removal_pipeline.core.exceptions import (
    ApiError,
    ConfigurationError,
    RetryExhausted,
)
from bg_removal_pipeline.testing.fakes import (
    FakeLogger,
    FakeRemoveBgSession,
    FakeResponse,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nprocessed"
RATE_LIMITED = FakeResponse(429, reason="Too Many Requests", text="rate limit")


def make_client(responses, api_key="test-key", **kwargs):
    session = FakeRemoveBgSession(responses)
    sleep = Mock()
    client = RemoveBgClient(
        api_key=api_key,
        logger=FakeLogger(),
        session=session,
        sleep=sleep,
        jitter=kwargs.pop("jitter", lambda: 0.5),
        **kwargs,
    )
    return client, session, sleep


class TestComputeBackoff:
    @pytest.mark.parametrize("attempt", range(6))
    def test_backoff_within_jitter_window(self, attempt):
        for _ in range(20):
            wait = compute_backoff(attempt, random.random())
            assert 2**attempt <= wait < 2**attempt + 1

    def test_backoff_exact_values(self):
        assert compute_backoff(0, 0.0) == 1
        assert compute_backoff(3, 0.25) == 8.25


class TestRemoveBgClientSubmit:
    def test_success_returns_response_bytes(self):
        client, session, sleep = make_client([FakeResponse(200, content=PNG_BYTES)])

        result = client.submit(b"jpeg-bytes", "recommendation/eat/apple.jpg")

        assert result == PNG_BYTES
        assert len(session.calls) == 1
        sleep.assert_not_called()

    def test_request_shape(self):
        client, session, _ = make_client(
            [FakeResponse(200, content=PNG_BYTES)], timeout=12.5
        )

        client.submit(b"raw", "folder/photo.webp")

        call = session.calls[0]
        assert call["url"] == "https://api.remove.bg/v1.0/removebg"
        assert call["headers"] == {"X-Api-Key": "test-key"}
        assert call["data"] == {"size": "auto"}
        assert call["files"] == {
            "image_file": ("folder/photo.webp", b"raw", "image/png")
        }
        assert call["timeout"] == 12.5

    @pytest.mark.parametrize("api_key", [None, ""])
    def test_missing_api_key_raises_before_request(self, api_key):
        client, session, _ = make_client([FakeResponse(200)], api_key=api_key)

        with pytest.raises(ConfigurationError):
            client.submit(b"raw", "a.png")

        assert session.calls == []

    def test_always_rate_limited_exhausts_retries(self):
        client, session, sleep = make_client([RATE_LIMITED])

        with pytest.raises(RetryExhausted) as exc_info:
            client.submit(b"raw", "a.png")

        assert exc_info.value.attempts == 5
        assert len(session.calls) == 5
        waits = [c.args[0] for c in sleep.call_args_list]
        assert waits == [1.5, 2.5, 4.5, 8.5, 16.5]

    def test_custom_max_retries(self):
        client, session, _ = make_client([RATE_LIMITED], max_retries=2)

        with pytest.raises(RetryExhausted) as exc_info:
            client.submit(b"raw", "a.png")

        assert exc_info.value.attempts == 2
        assert len(session.calls) == 2

    def test_rate_limit_then_success(self):
        client, session, sleep = make_client(
            [RATE_LIMITED, RATE_LIMITED, FakeResponse(200, content=PNG_BYTES)]
        )

        assert client.submit(b"raw", "a.png") == PNG_BYTES
        assert len(session.calls) == 3
        assert sleep.call_count == 2

    def test_each_attempt_builds_a_new_payload(self):
        client, session, _ = make_client(
            [RATE_LIMITED, FakeResponse(200, content=PNG_BYTES)]
        )

        client.submit(b"raw", "a.png")

        first, second = session.calls
        assert first["files"] is not second["files"]
        assert first["data"] is not second["data"]
        assert first["files"] == second["files"]

    def test_non_rate_limit_error_fails_immediately(self):
        client, session, sleep = make_client(
            [
                FakeResponse(400, reason="Bad Request", text='{"errors":["bad"]}'),
                FakeResponse(200, content=PNG_BYTES),
            ]
        )

        with pytest.raises(ApiError) as exc_info:
            client.submit(b"raw", "a.png")

        assert exc_info.value.status_code == 400
        assert exc_info.value.reason == "Bad Request"
        assert exc_info.value.body == '{"errors":["bad"]}'
        assert len(session.calls) == 1
        sleep.assert_not_called()

    def test_redirect_status_is_not_success(self):
        client, session, sleep = make_client(
            [FakeResponse(304, content=b"", reason="Not Modified")]
        )

        with pytest.raises(ApiError) as exc_info:
            client.submit(b"raw", "a.png")

        assert exc_info.value.status_code == 304
        assert len(session.calls) == 1
        sleep.assert_not_called()

    def test_error_after_rate_limit_is_not_retried(self):
        client, session, _ = make_client(
            [RATE_LIMITED, FakeResponse(402, reason="Payment Required", text="credits")]
        )

        with pytest.raises(ApiError) as exc_info:
            client.submit(b"raw", "a.png")

        assert exc_info.value.status_code == 402
        assert len(session.calls) == 2

    def test_rate_limit_logged_as_warning(self):
        logger = FakeLogger()
        client = RemoveBgClient(
            api_key="k",
            logger=logger,
            session=FakeRemoveBgSession([RATE_LIMITED, FakeResponse(200, content=b"x")]),
            sleep=Mock(),
            jitter=lambda: 0.04,
        )

        client.submit(b"raw", "a.png")

        warnings = logger.messages("WARNING")
        assert warnings == ["Rate limit hit, waiting 1.0s before retry 1/5..."]
