"""Unit tests for notion_api.retry_logic module."""

from unittest.mock import MagicMock, patch

import pytest

from src.notion_api.errors import APIAccessError
from src.notion_api.retry_logic import _is_rate_limit_error, _retry_after, retry_on_rate_limit


def _rate_limited(retry_after=None):
    error = Exception("HTTP 429")
    error.response = MagicMock()
    error.response.status_code = 429
    error.response.headers = {'Retry-After': retry_after} if retry_after is not None else {}
    return error


class TestIsRateLimitError:
    """Test cases for _is_rate_limit_error function."""

    def test_detects_status_code_attribute(self):
        error = Exception("API error")
        error.status_code = 429
        assert _is_rate_limit_error(error) is True

    def test_detects_response_status_code(self):
        assert _is_rate_limit_error(_rate_limited()) is True

    def test_detects_notion_error_code_in_message(self):
        """Notion reports rate limiting with the code 'rate_limited'."""
        assert _is_rate_limit_error(Exception('{"code": "rate_limited"}')) is True

    def test_detects_too_many_requests_in_message(self):
        assert _is_rate_limit_error(Exception("Too Many Requests")) is True

    def test_other_errors_are_not_rate_limits(self):
        error = Exception("Not found")
        error.status_code = 404
        assert _is_rate_limit_error(error) is False


class TestRetryAfter:
    """Test cases for _retry_after function."""

    def test_reads_header(self):
        assert _retry_after(_rate_limited('7')) == 7

    def test_missing_header(self):
        assert _retry_after(_rate_limited()) is None

    def test_invalid_header(self):
        assert _retry_after(_rate_limited('soon')) is None

    def test_no_response(self):
        assert _retry_after(Exception("x")) is None


class TestRetryOnRateLimit:
    """Test cases for retry_on_rate_limit function."""

    def test_success_on_first_attempt(self):
        mock_func = MagicMock(return_value="ok")

        assert retry_on_rate_limit(mock_func, "a", key="v") == "ok"
        mock_func.assert_called_once_with("a", key="v")

    @patch('src.notion_api.retry_logic.time.sleep')
    def test_retries_with_exponential_backoff(self, mock_sleep):
        mock_func = MagicMock(side_effect=[_rate_limited(), _rate_limited(), "ok"])

        assert retry_on_rate_limit(mock_func) == "ok"
        assert mock_func.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2]

    @patch('src.notion_api.retry_logic.time.sleep')
    def test_honours_longer_retry_after(self, mock_sleep):
        """The server's Retry-After wins when it is longer than the backoff."""
        mock_func = MagicMock(side_effect=[_rate_limited('10'), "ok"])

        retry_on_rate_limit(mock_func)

        mock_sleep.assert_called_once_with(10)

    @patch('src.notion_api.retry_logic.time.sleep')
    def test_gives_up_after_three_retries(self, mock_sleep):
        mock_func = MagicMock(side_effect=_rate_limited())

        with pytest.raises(APIAccessError):
            retry_on_rate_limit(mock_func)

        assert mock_func.call_count == 4
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1, 2, 4]

    @patch('src.notion_api.retry_logic.time.sleep')
    def test_other_errors_fail_fast(self, mock_sleep):
        mock_func = MagicMock(side_effect=ValueError("boom"))

        with pytest.raises(ValueError):
            retry_on_rate_limit(mock_func)

        mock_func.assert_called_once()
        mock_sleep.assert_not_called()
