"""DI provider for the identity domain."""

import logging

from dishka import from_context, provide
from starlette.requests import Request

from idverify.config import Config
from idverify.domain.identity.model.context import IdentityContext
from idverify.domain.identity.port.identity_verifier import IdentityVerifier
from idverify.domain.identity.service.authenticator import (
    RequestAuthenticator,
    require_identity_context,
)
from idverify.util.di.base import Provider
from idverify.util.di.scope import Scope

logger = logging.getLogger(__name__)


class AuthProvider(Provider):
    """DI provider for identity resolution."""

    config = from_context(provides=Config, scope=Scope.APP)
    request = from_context(provides=Request, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_request_authenticator(
        self, config: Config, verifier: IdentityVerifier
    ) -> RequestAuthenticator:
        """Provide RequestAuthenticator. Stateless, so shared app-wide."""
        logger.info(
            "RequestAuthenticator headers: user_token=%s, service_token=%s, user_identity=%s",
            config.headers.user_token,
            config.headers.service_token,
            config.headers.user_identity,
        )
        return RequestAuthenticator(_verifier=verifier, _headers=config.headers)

    @provide(scope=Scope.UOW)
    async def get_identity_context(
        self,
        request: Request,
        authenticator: RequestAuthenticator,
    ) -> IdentityContext:
        """Resolve the IdentityContext of the current request.

        Raises:
            AuthenticationError: No credentials, or the authority rejected them
            IdVerifyError: Any hard failure while verifying
        """
        result = await authenticator.check_request(request)
        return require_identity_context(result)
