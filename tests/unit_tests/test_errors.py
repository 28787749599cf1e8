"""Unit tests for errors.py."""

import pytest

from flight_team.errors import RemoteCallError


class TestRemoteCallError:
    """Tests for RemoteCallError."""

    def test_message_includes_request_and_status(self):
        error = RemoteCallError(400, '{"error": "bad"}', method="POST", path="/groups")

        assert str(error) == 'POST /groups failed with status 400: {"error": "bad"}'

    def test_message_without_status(self):
        error = RemoteCallError(None, "connection refused", method="GET", path="/me")

        assert str(error) == "GET /me failed: connection refused"

    def test_message_without_request(self):
        assert str(RemoteCallError(500, "oops")) == "Graph request failed with status 500: oops"

    @pytest.mark.parametrize("status,expected", [(404, True), (400, False), (None, False)])
    def test_is_not_found(self, status, expected):
        assert RemoteCallError(status, "").is_not_found is expected
