"""Custom Dishka scopes for idverify."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """idverify dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (shared httpx client, identity verifier)
    - UOW: Unit of Work (one inbound HTTP request)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
