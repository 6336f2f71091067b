"""Resolved identities of an authenticated request."""

from dataclasses import dataclass

from idverify.util.headers import USER_IDENTITY_HEADER, set_user_identity


@dataclass(frozen=True)
class IdentityContext:
    """Who made the request, and on whose behalf.

    ``caller_identity`` is the owner of the credential that was verified.
    ``user_identity`` is the end user the call is made for: the same value
    for user tokens, the forwarded ``User-Identity`` header (possibly empty)
    for service tokens.

    One instance is created per authenticated request and handed to the
    caller explicitly; it is never stored globally.
    """

    user_identity: str
    caller_identity: str

    @property
    def is_user_present(self) -> bool:
        return bool(self.user_identity)

    @property
    def is_caller_present(self) -> bool:
        return bool(self.caller_identity)

    def forwarding_headers(self, header_name: str = USER_IDENTITY_HEADER) -> dict[str, str]:
        """Headers that forward the user identity to a downstream service.

        Returns an empty dict when there is no user to forward.
        """
        headers: dict[str, str] = {}
        set_user_identity(headers, self.user_identity, header_name=header_name)
        return headers
