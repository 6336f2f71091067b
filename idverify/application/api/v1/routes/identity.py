"""Identity API routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from idverify.domain.identity.model.context import IdentityContext

router = APIRouter(
    prefix="/api/v1/identity",
    tags=["identity"],
    route_class=DishkaRoute,
)


class IdentityContextResponse(BaseModel):
    """Identities resolved for the current request."""

    user_identity: str
    caller_identity: str


@router.get("")
async def get_identity(context: FromDishka[IdentityContext]) -> IdentityContextResponse:
    """Resolve who is calling, from the request's credential headers."""
    return IdentityContextResponse(
        user_identity=context.user_identity,
        caller_identity=context.caller_identity,
    )
