"""Header names and get/set helpers for identity-related HTTP headers.

Getters accept anything header-like: a starlette ``Headers``, an
``httpx.Headers`` or a plain mapping. Lookups are case-insensitive.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any

from idverify.domain.shared.error import IdVerifyError

# User token header
USER_AUTH_TOKEN_HEADER = "X-Florence-Token"

# Service token header
SERVICE_AUTH_TOKEN_HEADER = "Authorization"

# Forwards an already confirmed user identity to another API
USER_IDENTITY_HEADER = "User-Identity"

BEARER_PREFIX = "Bearer "


class HeaderError(IdVerifyError):
    """A header could not be read from a request."""


class HeaderNotFoundError(HeaderError):
    """The header is absent or empty."""

    def __init__(self, name: str) -> None:
        super().__init__(f"header not found: {name}", code="header_not_found")
        self.name = name


class RequestMissingError(HeaderError):
    """Headers were requested from a missing request."""

    def __init__(self) -> None:
        super().__init__("error reading request header, request was missing", code="request_missing")


class AmbiguousHeaderError(HeaderError):
    """The header was sent more than once with different values."""

    def __init__(self, name: str, count: int) -> None:
        super().__init__(
            f"header {name} sent {count} times with conflicting values",
            code="ambiguous_header",
        )
        self.name = name
        self.count = count


def is_not_found(error: Exception) -> bool:
    """True if ``error`` only means the header was absent."""
    return isinstance(error, HeaderNotFoundError)


def _values(headers: Any, name: str) -> list[str]:
    if hasattr(headers, "getlist"):  # starlette
        return list(headers.getlist(name))
    if hasattr(headers, "get_list"):  # httpx
        return list(headers.get_list(name))
    lowered = name.lower()
    return [v for k, v in headers.items() if k.lower() == lowered]


def get_request_header(headers: Mapping[str, str] | None, name: str) -> str:
    """Return the value of header ``name``.

    Raises:
        RequestMissingError: If ``headers`` is None
        HeaderNotFoundError: If the header is absent or empty
        AmbiguousHeaderError: If the header repeats with different values
    """
    if headers is None:
        raise RequestMissingError()

    values = [v for v in _values(headers, name) if v]
    if not values:
        raise HeaderNotFoundError(name)
    if len(set(values)) > 1:
        raise AmbiguousHeaderError(name, len(values))
    return values[0]


def get_user_auth_token(headers: Mapping[str, str] | None, header_name: str = USER_AUTH_TOKEN_HEADER) -> str:
    return get_request_header(headers, header_name)


def get_service_auth_token(
    headers: Mapping[str, str] | None, header_name: str = SERVICE_AUTH_TOKEN_HEADER
) -> str:
    """Return the service token as sent, ``Bearer `` prefix included if present."""
    return get_request_header(headers, header_name)


def get_user_identity(headers: Mapping[str, str] | None, header_name: str = USER_IDENTITY_HEADER) -> str:
    return get_request_header(headers, header_name)


def get_optional_header(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Like get_request_header, but returns None when the header is absent.

    Other lookup faults still raise.
    """
    try:
        return get_request_header(headers, name)
    except HeaderNotFoundError:
        return None


def with_bearer_prefix(token: str) -> str:
    if token.startswith(BEARER_PREFIX):
        return token
    return BEARER_PREFIX + token


def set_user_auth_token(
    headers: MutableMapping[str, str], value: str, header_name: str = USER_AUTH_TOKEN_HEADER
) -> None:
    """Set the user token header. Empty values are ignored."""
    if value:
        headers[header_name] = value


def set_service_auth_token(
    headers: MutableMapping[str, str], value: str, header_name: str = SERVICE_AUTH_TOKEN_HEADER
) -> None:
    """Set the service token header, adding ``Bearer `` if missing. Empty values are ignored."""
    if value:
        headers[header_name] = with_bearer_prefix(value)


def set_user_identity(
    headers: MutableMapping[str, str], value: str, header_name: str = USER_IDENTITY_HEADER
) -> None:
    """Set the forwarded user identity header. Empty values are ignored."""
    if value:
        headers[header_name] = value
