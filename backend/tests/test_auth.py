"""
PromptMaster Backend - Caller Identity Tests
============================================

X-User-ID values are trimmed and checked before any prompt query runs.
"""

import pytest

from promptmaster.auth import MAX_USER_ID_LENGTH, resolve_user_id
from promptmaster.exceptions import AuthenticationError


class TestResolveUserId:

    @pytest.mark.parametrize("raw", [
        "user-a",
        "user:42",
        "amara@example.org",
        "3f2c9a1e-6b1d-4c55-9d0e-2a7b8c9d0e1f",
        "x" * MAX_USER_ID_LENGTH,
    ])
    def test_accepts_well_formed_ids(self, raw):
        assert resolve_user_id(raw) == raw

    def test_strips_surrounding_whitespace(self):
        assert resolve_user_id("  user-a\t") == "user-a"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing_id(self, raw):
        with pytest.raises(AuthenticationError) as exc_info:
            resolve_user_id(raw)

        assert exc_info.value.message == "Missing X-User-ID header"

    @pytest.mark.parametrize("raw", ["bad id", "user/1", "<script>", "x" * (MAX_USER_ID_LENGTH + 1)])
    def test_malformed_id(self, raw):
        with pytest.raises(AuthenticationError) as exc_info:
            resolve_user_id(raw)

        assert exc_info.value.message == "Invalid X-User-ID header"
        assert exc_info.value.context["length"] == len(raw)
