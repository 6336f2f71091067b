from .di import AuthInfraProvider, IdentityHttpClient
from .identity_verifier import HttpIdentityVerifier

__all__ = ["AuthInfraProvider", "HttpIdentityVerifier", "IdentityHttpClient"]
