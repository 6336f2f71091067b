"""DI provider for HTTP infrastructure."""

from typing import AsyncIterable, NewType

import httpx
from dishka import provide

from idverify.config import Config
from idverify.domain.identity.port.identity_verifier import IdentityVerifier
from idverify.infrastructure.http.identity_verifier import HttpIdentityVerifier
from idverify.util.di.base import Provider
from idverify.util.di.scope import Scope

# Disambiguate from any other httpx.AsyncClient registered by the host app
IdentityHttpClient = NewType("IdentityHttpClient", httpx.AsyncClient)


class AuthInfraProvider(Provider):
    """DI provider for identity authority adapters."""

    @provide(scope=Scope.APP)
    async def get_identity_http_client(self, config: Config) -> AsyncIterable[IdentityHttpClient]:
        """Shared HTTP client for identity checks (connection pooling).

        Created once per container and closed when the container closes.
        """
        client = httpx.AsyncClient(timeout=config.authority.timeout)
        yield IdentityHttpClient(client)
        await client.aclose()

    @provide(scope=Scope.APP, provides=IdentityVerifier)
    def get_identity_verifier(
        self, config: Config, http_client: IdentityHttpClient
    ) -> HttpIdentityVerifier:
        return HttpIdentityVerifier(
            config=config.authority,
            headers=config.headers,
            http_client=http_client,
        )
