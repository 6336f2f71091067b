"""Tagged results of identity verification.

Verification never signals an expected failure by raising. Instead each
step returns exactly one of:

- ``Verified`` / ``Authenticated``: success, status 200.
- ``Rejected``: soft failure (no credentials, authority said no). Carries
  the status the caller should answer with.
- ``Faulted``: hard failure (bad URL, transport, malformed body, header
  fault). Always status 500 and always an ``IdVerifyError``.

Because every variant carries a single payload, "failed and also errored"
states cannot be represented.
"""

from dataclasses import dataclass
from typing import ClassVar

from idverify.domain.identity.model.context import IdentityContext
from idverify.domain.identity.model.value import IdentityResponse
from idverify.domain.shared.error import IdVerifyError

NO_CREDENTIALS_REASON = "no headers set on request"
UNEXPECTED_STATUS_REASON = "unexpected status code returned from identity authority"


class _Outcome:
    is_soft_failure: ClassVar[bool] = False
    is_fault: ClassVar[bool] = False

    @property
    def ok(self) -> bool:
        return not (self.is_soft_failure or self.is_fault)


@dataclass(frozen=True)
class Verified(_Outcome):
    """The identity authority accepted the credential."""

    identity: IdentityResponse

    @property
    def http_status(self) -> int:
        return 200


@dataclass(frozen=True)
class Authenticated(_Outcome):
    """The request's identities were resolved."""

    context: IdentityContext

    @property
    def http_status(self) -> int:
        return 200


@dataclass(frozen=True)
class Rejected(_Outcome):
    """Soft failure: an expected outcome, not a system fault."""

    is_soft_failure: ClassVar[bool] = True

    http_status: int
    reason: str
    code: str = "unauthenticated"


@dataclass(frozen=True)
class Faulted(_Outcome):
    """Hard failure: should be logged as a fault by the caller."""

    is_fault: ClassVar[bool] = True

    error: IdVerifyError
    http_status: int = 500


VerificationOutcome = Verified | Rejected | Faulted
AuthResult = Authenticated | Rejected | Faulted
