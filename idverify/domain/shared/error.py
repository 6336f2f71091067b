"""Error hierarchy shared across idverify.

Errors are split into two families:

- DomainError: expected business outcomes (missing credentials, rejected
  credentials, bad input). Callers should not alert on these.
- InfrastructureError: something between us and the identity authority
  broke (bad URL, transport failure, unparsable response). Callers should
  log these as faults.
"""


class IdVerifyError(Exception):
    """Base for all idverify errors.

    Attributes:
        message: Human readable description.
        code: Stable machine readable error code.
    """

    def __init__(self, message: str, *, code: str = "error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, code={self.code!r})"


# =============================================================================
# Domain errors (soft)
# =============================================================================


class DomainError(IdVerifyError):
    """Expected failure caused by the request rather than the system."""


class ValidationError(DomainError):
    """Input failed validation."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "validation_error",
        field: str | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.field = field


class AuthenticationError(DomainError):
    """The caller could not be identified.

    Carries the status code the caller should answer with, which for a
    remote rejection is the identity authority's own status.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "unauthenticated",
        status_code: int = 401,
    ) -> None:
        super().__init__(message, code=code)
        self.status_code = status_code


# =============================================================================
# Infrastructure errors (hard)
# =============================================================================


class InfrastructureError(IdVerifyError):
    """Failure outside the domain: network, remote services, configuration."""


class RequestConstructionError(InfrastructureError):
    """The outbound identity request could not be built."""

    def __init__(self, message: str, *, code: str = "invalid_authority_url") -> None:
        super().__init__(message, code=code)


class ExternalServiceError(InfrastructureError):
    """The identity authority could not be reached or answered nonsense."""


class TransportError(ExternalServiceError):
    """The HTTP exchange with the identity authority did not complete."""

    def __init__(self, message: str, *, code: str = "idp_unavailable") -> None:
        super().__init__(message, code=code)


class MalformedResponseError(ExternalServiceError):
    """The identity authority answered 200 with a body we cannot parse."""

    def __init__(self, message: str, *, code: str = "malformed_identity_response") -> None:
        super().__init__(message, code=code)


class ConfigurationError(IdVerifyError):
    """The service is misconfigured."""

    def __init__(self, message: str, *, code: str = "configuration_error") -> None:
        super().__init__(message, code=code)
