"""Masking of sensitive parameter values in debug output."""

from typing import Any

REDACT_KEYS: frozenset[str] = frozenset({
    "api_key",
    "apikey",
    "token",
    "access_token",
    "refresh_token",
    "auth_token",
    "secret",
    "client_secret",
    "password",
    "authorization",
    "private_key",
    "credentials",
})

REDACTED_VALUE = "[REDACTED]"


def redact_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Recursively redact sensitive keys from parameters or fields.

    Placeholder keys are matched without their braces, so ``"{token}"`` is
    redacted like ``"token"``. The original mapping is never mutated.

    Args:
        payload: The dictionary to redact sensitive values from.

    Returns:
        A new dictionary with sensitive values replaced by "[REDACTED]".
    """
    return _redact_recursive(payload)


def is_sensitive_key(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    return key.strip("{}").lower() in REDACT_KEYS


def _redact_recursive(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            key: REDACTED_VALUE if is_sensitive_key(key) else _redact_recursive(value)
            for key, value in obj.items()
        }
    elif isinstance(obj, (list, tuple)):
        return [_redact_recursive(item) for item in obj]
    else:
        return obj
