# -*- coding: utf-8 -*-
"""
Security utilities for logging
"""
from typing import Any

_SENSITIVE_PATTERNS = (
    "api_key", "apikey", "api-key",
    "access_token", "secret", "password",
    "token", "authorization", "key",
)


def redact_api_keys(data: Any) -> Any:
    """
    Redact API keys from data before logging

    Args:
        data: Data structure that might contain API keys

    Returns:
        Copy of the data with sensitive values replaced by "[REDACTED]"
    """
    if isinstance(data, dict):
        redacted = {}
        for key, value in data.items():
            if _is_api_key_field(str(key)):
                redacted[key] = "[REDACTED]"
            elif isinstance(value, (dict, list)):
                redacted[key] = redact_api_keys(value)
            else:
                redacted[key] = value
        return redacted
    if isinstance(data, list):
        return [redact_api_keys(item) for item in data]
    return data


def _is_api_key_field(key: str) -> bool:
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in _SENSITIVE_PATTERNS)
