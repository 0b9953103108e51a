# -*- coding: utf-8 -*-
from utils.security import redact_api_keys


def test_redacts_nested_keys():
    data = {"key": "abc", "inn": "7707083893", "headers": {"Authorization": "Token x"}, "items": [{"api_key": "y"}]}
    redacted = redact_api_keys(data)
    assert redacted == {
        "key": "[REDACTED]",
        "inn": "7707083893",
        "headers": {"Authorization": "[REDACTED]"},
        "items": [{"api_key": "[REDACTED]"}],
    }
    assert data["key"] == "abc"
