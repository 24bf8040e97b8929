"""
Shared helpers for address validation and tool responses.
"""

import re
import json
import math
import logging
import functools
from typing import Any, Callable, Optional

from fastmcp.exceptions import ToolError

logger = logging.getLogger(__name__)


TOOL_PREFIX = "HYPERLIQUID_"

ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")

INVALID_ADDRESS_MESSAGE = "Error: Invalid address format. Address must be in 0x format."
INVALID_VAULT_ADDRESS_MESSAGE = "Error: Invalid vault address format. Address must be in 0x format."
INVALID_USER_ADDRESS_MESSAGE = "Error: Invalid user address format. Address must be in 0x format."
VAULT_NOT_FOUND_MESSAGE = "Error: Vault not found or invalid vault address."


def is_valid_address(address: Any) -> bool:
    """
    Check that a value is a 0x-prefixed, 40 hex digit account address.

    Args:
        address: Value to check. Non-strings are never valid.

    Returns:
        bool: True if the address is well formed
    """
    if not isinstance(address, str):
        return False
    return ADDRESS_PATTERN.fullmatch(address) is not None


def format_address(address: Any) -> Optional[str]:
    """
    Return the address unchanged if it is valid, else None.

    The address is not lower-cased or checksummed.
    """
    if is_valid_address(address):
        return address
    return None


def require_address(address: Any, message: str = INVALID_ADDRESS_MESSAGE) -> str:
    """Validate an address argument, raising a ToolError if malformed."""
    formatted = format_address(address)
    if formatted is None:
        logger.warning(f"Rejected malformed address: {address!r}")
        raise ToolError(message)
    return formatted


def _replace_non_finite(value: Any) -> Any:
    # NaN and infinities have no JSON form; they are written as null
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _replace_non_finite(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_replace_non_finite(item) for item in value]
    return value


def format_tool_result(result: Any) -> str:
    """
    Serialize a tool result as pretty-printed JSON text.

    Non-finite floats (NaN from unparseable decimals) are written as null so
    the text is always strict JSON.
    """
    return json.dumps(_replace_non_finite(result), indent=2, allow_nan=False)


def tool_name(operation: str) -> str:
    return f"{TOOL_PREFIX}{operation}"


def handle_tool_errors(operation: str) -> Callable:
    """
    Decorator turning unexpected exceptions into error-flagged tool results.

    ToolErrors raised deliberately (validation, not-found) pass through
    untouched; anything else is logged and re-raised as a ToolError naming
    the tool.
    """
    name = tool_name(operation)

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ToolError:
                raise
            except Exception as e:
                logger.error(f"Unexpected error in {name} tool: {str(e)}")
                raise ToolError(f"Error in {name}: {str(e)}") from e
        return wrapper

    return decorator
