"""Identity domain models."""

from .context import IdentityContext
from .credential import (
    Credential,
    CredentialKind,
    CredentialPresence,
    ServiceCredential,
    UserCredential,
    make_credential,
)
from .outcome import (
    AuthResult,
    Authenticated,
    Faulted,
    Rejected,
    VerificationOutcome,
    Verified,
)
from .sample import TokenSample, sample_token
from .value import IdentityResponse

__all__ = [
    "AuthResult",
    "Authenticated",
    "Credential",
    "CredentialKind",
    "CredentialPresence",
    "Faulted",
    "IdentityContext",
    "IdentityResponse",
    "Rejected",
    "ServiceCredential",
    "TokenSample",
    "UserCredential",
    "VerificationOutcome",
    "Verified",
    "make_credential",
    "sample_token",
]
