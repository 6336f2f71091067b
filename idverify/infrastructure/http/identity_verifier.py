"""HTTP adapter for the IdentityVerifier port."""

import logging
from typing import Any, TypeVar

import httpx
import logfire
import pydantic

from idverify.config import HeaderConfig, IdentityAuthorityConfig
from idverify.domain.identity.model.credential import Credential, CredentialKind
from idverify.domain.identity.model.outcome import (
    UNEXPECTED_STATUS_REASON,
    Faulted,
    Rejected,
    VerificationOutcome,
    Verified,
)
from idverify.domain.identity.model.value import IdentityResponse
from idverify.domain.identity.port.identity_verifier import IdentityVerifier
from idverify.domain.shared.error import (
    MalformedResponseError,
    RequestConstructionError,
    TransportError,
)
from idverify.util.headers import set_service_auth_token, set_user_auth_token

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseException)


class HttpIdentityVerifier(IdentityVerifier):
    """Verifies credentials with ``GET <authority>/identity`` over httpx.

    The client is injected and shared; this class never creates, retries
    through, or closes it.
    """

    def __init__(
        self,
        config: IdentityAuthorityConfig,
        headers: HeaderConfig,
        http_client: httpx.AsyncClient,
    ) -> None:
        self._config = config
        self._headers = headers
        self._http = http_client

    @property
    def identity_url(self) -> str:
        return self._config.identity_url

    async def verify(self, credential: Credential) -> VerificationOutcome:
        log_data: dict[str, Any] = {
            "url": self.identity_url,
            "token_type": str(credential.kind),
            "token": credential.sample.as_log_data(),
        }
        logger.info("calling identity authority to authenticate caller identity: %s", log_data)

        with logfire.span("VerifyCredential", token_type=str(credential.kind)):
            try:
                request = self._build_request(credential)
            except RequestConstructionError as e:
                logger.error("error creating identity authority request: %s, %s", e.message, log_data)
                return Faulted(e)

            try:
                response = await self._http.send(request, stream=True)
            except httpx.HTTPError as e:
                logger.error("identity authority request failed: %s, %s", e, log_data)
                return Faulted(_wrap(TransportError(f"identity authority request failed: {e}"), e))

            try:
                return await self._classify(response, log_data)
            finally:
                await self._close_response(response, log_data)

    def _build_request(self, credential: Credential) -> httpx.Request:
        try:
            url = httpx.URL(self.identity_url)
        except httpx.InvalidURL as e:
            raise RequestConstructionError(f"invalid identity authority url: {e}") from e

        if url.scheme not in ("http", "https") or not url.host:
            raise RequestConstructionError(
                f"identity authority url must be absolute http(s): {self.identity_url!r}"
            )

        headers: dict[str, str] = {}
        if credential.kind is CredentialKind.USER:
            set_user_auth_token(headers, credential.raw, header_name=self._headers.user_token)
        else:
            set_service_auth_token(headers, credential.raw, header_name=self._headers.service_token)

        return self._http.build_request("GET", url, headers=headers)

    async def _classify(
        self, response: httpx.Response, log_data: dict[str, Any]
    ) -> VerificationOutcome:
        if response.status_code != 200:
            logger.info(
                "identity authority rejected credential: status=%d, %s",
                response.status_code,
                log_data,
            )
            return Rejected(
                http_status=response.status_code,
                reason=UNEXPECTED_STATUS_REASON,
                code="identity_rejected",
            )

        try:
            body = await response.aread()
        except httpx.HTTPError as e:
            logger.error("error reading identity authority response: %s, %s", e, log_data)
            return Faulted(_wrap(TransportError(f"error reading identity response: {e}"), e))

        try:
            identity = IdentityResponse.model_validate_json(body)
        except pydantic.ValidationError as e:
            logger.error(
                "identity authority returned malformed body: %d errors, %s",
                e.error_count(),
                log_data,
            )
            return Faulted(
                _wrap(MalformedResponseError(f"unable to parse identity response: {e}"), e)
            )

        return Verified(identity)

    async def _close_response(self, response: httpx.Response, log_data: dict[str, Any]) -> None:
        try:
            await response.aclose()
        except httpx.HTTPError as e:
            logger.error("error closing identity authority response body: %s, %s", e, log_data)


def _wrap(error: E, cause: BaseException) -> E:
    """Attach ``cause`` to an error that is returned rather than raised."""
    error.__cause__ = cause
    return error
