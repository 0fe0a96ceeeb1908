"""Logging utilities for backend services

Helpers that keep request/response payloads readable in the logs: generated
scripts run to thousands of characters and request bodies carry the
caller's API key.
"""
from typing import Any

SENSITIVE_KEYS = {"apikey", "api_key", "authorization", "x-api-key", "cookie"}


def truncate_text(data: Any, max_length: int = 200) -> Any:
    """
    Truncate long strings for logging

    Args:
        data: Value to truncate (non-strings are returned unchanged)
        max_length: Maximum length before truncation

    Returns:
        Truncated string with size info
    """
    if not isinstance(data, str):
        return data

    if len(data) <= max_length:
        return data

    return f"{data[:max_length]}... ({len(data)} chars)"


def redact_secret(value: Any) -> str:
    """Mask a credential, keeping only a short prefix"""
    if not isinstance(value, str) or not value:
        return "<empty>"
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}****"


def sanitize_log_dict(data: Any, max_length: int = 200) -> Any:
    """
    Sanitize a payload for logging

    Credentials are masked and long strings truncated, recursing into
    nested dicts and lists.

    Args:
        data: Dict, list or primitive to sanitize
        max_length: Maximum length for string values

    Returns:
        Sanitized copy
    """
    if isinstance(data, dict):
        sanitized = {}
        for key, value in data.items():
            if isinstance(key, str) and key.lower() in SENSITIVE_KEYS:
                sanitized[key] = redact_secret(value)
            else:
                sanitized[key] = sanitize_log_dict(value, max_length)
        return sanitized
    if isinstance(data, list):
        return [sanitize_log_dict(item, max_length) for item in data]
    return truncate_text(data, max_length)
