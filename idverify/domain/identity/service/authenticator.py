"""Resolves the caller and user identities of an inbound request."""

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from idverify.config import HeaderConfig
from idverify.domain.identity.model.context import IdentityContext
from idverify.domain.identity.model.credential import (
    Credential,
    CredentialKind,
    CredentialPresence,
    ServiceCredential,
    UserCredential,
    make_credential,
)
from idverify.domain.identity.model.outcome import (
    NO_CREDENTIALS_REASON,
    Authenticated,
    AuthResult,
    Faulted,
    Rejected,
    Verified,
)
from idverify.domain.identity.model.sample import sample_token
from idverify.domain.identity.model.value import IdentityResponse
from idverify.domain.identity.port.identity_verifier import IdentityVerifier
from idverify.domain.shared.error import AuthenticationError, ValidationError
from idverify.domain.shared.service import Service
from idverify.util.headers import HeaderError, get_optional_header

logger = logging.getLogger(__name__)


class InboundRequest(Protocol):
    """Anything exposing request headers (starlette and httpx requests both do)."""

    @property
    def headers(self) -> Mapping[str, str]: ...


class RequestAuthenticator(Service):
    """Works out who is calling.

    - check_request: read credentials off a request, verify one of them and
      resolve the caller/user identity pair
    - check_token_identity: verify a single token and raise on failure

    Holds no per-request state; one instance may serve concurrent requests.
    """

    _verifier: IdentityVerifier
    _headers: HeaderConfig

    async def check_request(self, request: InboundRequest | None) -> AuthResult:
        """Authenticate ``request``.

        User tokens take precedence over service tokens when both are sent.
        A credential header repeated with conflicting values is a header
        fault, reported before any credential is selected.

        Returns:
            Authenticated with the resolved IdentityContext, Rejected (401
            when no credentials are sent, or the authority's status), or
            Faulted (500) for transport, parse and header faults.
        """
        headers = request.headers if request is not None else None
        try:
            user_token = get_optional_header(headers, self._headers.user_token)
            service_token = get_optional_header(headers, self._headers.service_token)
        except HeaderError as e:
            logger.error("unable to read credential headers: %s", e.message)
            return Faulted(e)

        presence = CredentialPresence.of(user_token, service_token)
        log_data = _credential_log_data(presence, user_token, service_token)

        if presence.preferred is None:
            logger.info("no credentials on request: %s", log_data)
            return Rejected(http_status=401, reason=NO_CREDENTIALS_REASON, code="missing_credentials")

        if presence.preferred is CredentialKind.USER:
            credential: Credential = UserCredential(user_token or "")
        else:
            credential = ServiceCredential(service_token or "")

        logger.info("authenticating request: %s", log_data)
        outcome = await self._verifier.verify(credential)
        if not isinstance(outcome, Verified):
            return outcome

        try:
            user_identity = self._resolve_user_identity(credential, outcome.identity, headers)
        except HeaderError as e:
            logger.error("unable to read forwarded user identity: %s, %s", e.message, log_data)
            return Faulted(e)

        context = IdentityContext(
            user_identity=user_identity,
            caller_identity=outcome.identity.identifier,
        )
        log_data["user_identity"] = context.user_identity
        log_data["caller_identity"] = context.caller_identity
        logger.info("caller identity retrieved: %s", log_data)

        return Authenticated(context)

    async def check_token_identity(self, token: str, kind: CredentialKind) -> IdentityResponse:
        """Verify one token of the given kind.

        Raises:
            ValidationError: If the token is empty
            AuthenticationError: If the identity authority rejects the token
            InfrastructureError: If the authority could not be asked or answered
                with an unreadable body
        """
        if not token:
            raise ValidationError("Empty token provided", code="empty_token", field="token")

        logger.info(
            "checking token identity: token_type=%s, token=%s",
            kind,
            sample_token(token).as_log_data(),
        )
        outcome = await self._verifier.verify(make_credential(token, kind))

        if isinstance(outcome, Rejected):
            raise AuthenticationError(outcome.reason, code=outcome.code, status_code=outcome.http_status)
        if isinstance(outcome, Faulted):
            raise outcome.error
        return outcome.identity

    def _resolve_user_identity(
        self,
        credential: Credential,
        identity: IdentityResponse,
        headers: Mapping[str, str] | None,
    ) -> str:
        """User tokens identify the user directly. Service calls may forward one."""
        if credential.kind is CredentialKind.USER:
            return identity.identifier
        return get_optional_header(headers, self._headers.user_identity) or ""


def require_identity_context(result: AuthResult) -> IdentityContext:
    """Unwrap an AuthResult, raising for anything but Authenticated."""
    if isinstance(result, Authenticated):
        return result.context
    if isinstance(result, Rejected):
        raise AuthenticationError(result.reason, code=result.code, status_code=result.http_status)
    raise result.error


def _credential_log_data(
    presence: CredentialPresence,
    user_token: str | None,
    service_token: str | None,
) -> dict[str, Any]:
    log_data: dict[str, Any] = {
        "is_user_request": presence.has_user,
        "is_service_request": presence.has_service,
    }
    if user_token:
        log_data["user_token"] = sample_token(user_token).as_log_data()
    if service_token:
        log_data["service_token"] = sample_token(service_token).as_log_data()
    return log_data
