"""Identity domain ports."""

from .identity_verifier import IdentityVerifier

__all__ = ["IdentityVerifier"]
