"""Identity verifier port for the identity domain."""

from abc import abstractmethod
from typing import Protocol

from idverify.domain.identity.model.credential import Credential
from idverify.domain.identity.model.outcome import VerificationOutcome
from idverify.domain.shared.port import Port


class IdentityVerifier(Port, Protocol):
    """Port for checking one credential against the identity authority.

    Implementations are adapters in infrastructure/ (e.g., HttpIdentityVerifier).
    """

    @abstractmethod
    async def verify(self, credential: Credential) -> VerificationOutcome:
        """Verify a single credential with exactly one remote call.

        Args:
            credential: The user or service credential to check

        Returns:
            Verified with the authority's identifier, Rejected with the
            authority's status code, or Faulted when the call could not be
            made or its answer could not be read. Never raises for those
            cases; cancellation still propagates.
        """
        ...
