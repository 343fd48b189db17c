"""Naming helpers shared by the generators."""

import re

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """Convert a PascalCase or camelCase identifier to snake_case.

    >>> to_snake_case("OrderId")
    'order_id'
    >>> to_snake_case("HTTPRequestId")
    'http_request_id'
    """
    return _WORD_BOUNDARY.sub("_", name).lower()
