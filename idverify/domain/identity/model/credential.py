"""Credentials carried by inbound requests."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar

from idverify.domain.identity.model.sample import TokenSample, sample_token


class CredentialKind(StrEnum):
    """Which header a credential came from, and how it is verified."""

    USER = "User"
    SERVICE = "Service"


@dataclass(frozen=True)
class Credential:
    """An opaque credential read from one request.

    The raw value is kept out of ``repr`` so a credential can be logged or
    shown in a traceback without leaking it.
    """

    raw: str = field(repr=False)
    kind: ClassVar[CredentialKind]

    @property
    def sample(self) -> TokenSample:
        return sample_token(self.raw)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sample={self.sample!r})"


@dataclass(frozen=True, repr=False)
class UserCredential(Credential):
    """Token identifying an end user."""

    kind: ClassVar[CredentialKind] = CredentialKind.USER


@dataclass(frozen=True, repr=False)
class ServiceCredential(Credential):
    """Token identifying a calling service. May or may not carry ``Bearer ``."""

    kind: ClassVar[CredentialKind] = CredentialKind.SERVICE


def make_credential(raw: str, kind: CredentialKind) -> Credential:
    """Build the credential variant for ``kind``."""
    if kind is CredentialKind.USER:
        return UserCredential(raw)
    return ServiceCredential(raw)


@dataclass(frozen=True)
class CredentialPresence:
    """Which credentials an inbound request carries."""

    has_user: bool
    has_service: bool

    @classmethod
    def of(cls, user_token: str | None, service_token: str | None) -> "CredentialPresence":
        return cls(has_user=bool(user_token), has_service=bool(service_token))

    @property
    def any(self) -> bool:
        return self.has_user or self.has_service

    @property
    def preferred(self) -> CredentialKind | None:
        """The kind that drives verification. User tokens win when both are set."""
        if self.has_user:
            return CredentialKind.USER
        if self.has_service:
            return CredentialKind.SERVICE
        return None
