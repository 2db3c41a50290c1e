"""Tests for utility functions."""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from blogdesk.utils.crypto import hash_password, verify_password
from blogdesk.utils.db_retry import is_retryable, retry_db_operation, safe_db_operation
from blogdesk.utils.negotiation import wants_json


def _operational(message):
    return OperationalError('SELECT 1', {}, Exception(message))


class TestCrypto:
    """Test cases for password hashing."""

    def test_hash_and_verify(self):
        hashed = hash_password('correct horse')
        assert hashed != 'correct horse'
        assert verify_password('correct horse', hashed)
        assert not verify_password('wrong horse', hashed)

    def test_malformed_hash(self):
        assert verify_password('anything', 'not-a-bcrypt-hash') is False


class TestDbRetry:
    """Test cases for the database retry helpers."""

    def test_is_retryable(self):
        assert is_retryable(_operational('server closed the connection unexpectedly'))
        assert not is_retryable(_operational('syntax error at or near "FROM"'))

    @patch('blogdesk.utils.db_retry.time.sleep')
    def test_retries_dropped_connection(self, mock_sleep, app):
        operation = MagicMock(side_effect=[_operational('connection reset by peer'), 'ok'])
        assert safe_db_operation(operation, 1) == 'ok'
        assert operation.call_count == 2
        mock_sleep.assert_called_once_with(0.5)

    @patch('blogdesk.utils.db_retry.time.sleep')
    def test_gives_up_after_max_retries(self, mock_sleep, app):
        @retry_db_operation(max_retries=2, delay=0.1)
        def always_down():
            raise _operational('could not connect to server')

        with pytest.raises(OperationalError):
            always_down()
        assert mock_sleep.call_count == 2

    def test_other_errors_are_not_retried(self, app):
        operation = MagicMock(side_effect=_operational('no such table: blogs'))
        with pytest.raises(OperationalError):
            safe_db_operation(operation)
        assert operation.call_count == 1


class TestNegotiation:
    """Test cases for JSON/HTML content negotiation."""

    @pytest.mark.parametrize(
        'kwargs, expected',
        [
            ({}, False),
            ({'headers': {'Accept': 'text/html'}}, False),
            ({'headers': {'Accept': '*/*'}}, False),
            ({'headers': {'Accept': 'application/json'}}, True),
            ({'query_string': {'format': 'json'}}, True),
            ({'json': {'title': 'x'}, 'method': 'POST'}, True),
        ],
    )
    def test_wants_json(self, app, kwargs, expected):
        with app.test_request_context('/blogs', **kwargs):
            assert wants_json() is expected
