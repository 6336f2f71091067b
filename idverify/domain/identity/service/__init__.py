"""Identity domain services."""

from .authenticator import InboundRequest, RequestAuthenticator

__all__ = ["InboundRequest", "RequestAuthenticator"]
