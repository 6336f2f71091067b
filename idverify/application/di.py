from dishka import AsyncContainer, make_async_container

from idverify.config import Config
from idverify.domain.identity.util.di import AuthProvider
from idverify.infrastructure.http import AuthInfraProvider
from idverify.util.di.scope import Scope


def create_container(config: Config | None = None) -> AsyncContainer:
    config = config or Config()

    return make_async_container(
        AuthInfraProvider(),
        AuthProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
