"""Value objects exchanged with the identity authority."""

from pydantic import BaseModel, ConfigDict


class IdentityResponse(BaseModel):
    """Body of a successful ``GET /identity`` answer.

    ``identifier`` is the authority's canonical name for whoever owns the
    verified credential: an email address for users, a service name for
    services. Unknown fields are ignored.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
