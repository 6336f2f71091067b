"""Unit tests for RequestAuthenticator."""

from unittest.mock import AsyncMock

import httpx
import pytest

from idverify.config import HeaderConfig
from idverify.domain.identity.model import (
    Authenticated,
    CredentialKind,
    Faulted,
    IdentityContext,
    IdentityResponse,
    Rejected,
    ServiceCredential,
    UserCredential,
    Verified,
)
from idverify.domain.identity.model.outcome import NO_CREDENTIALS_REASON
from idverify.domain.identity.port.identity_verifier import IdentityVerifier
from idverify.domain.identity.service.authenticator import (
    RequestAuthenticator,
    require_identity_context,
)
from idverify.domain.shared.error import (
    AuthenticationError,
    MalformedResponseError,
    TransportError,
    ValidationError,
)
from idverify.util.headers import AmbiguousHeaderError, RequestMissingError


def make_request(headers) -> httpx.Request:
    return httpx.Request("GET", "http://service.test/records", headers=headers)


def verified(identifier: str) -> Verified:
    return Verified(IdentityResponse(identifier=identifier))


@pytest.fixture
def mock_verifier() -> IdentityVerifier:
    """Create a mock IdentityVerifier."""
    verifier = AsyncMock(spec=IdentityVerifier)
    verifier.verify = AsyncMock()
    return verifier


@pytest.fixture
def authenticator(mock_verifier: IdentityVerifier) -> RequestAuthenticator:
    return RequestAuthenticator(_verifier=mock_verifier, _headers=HeaderConfig())


class TestCheckRequest:
    """Tests for RequestAuthenticator.check_request."""

    @pytest.mark.asyncio
    async def test_service_token_with_forwarded_user(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        """A service caller acting for a user gets both identities."""
        # Arrange
        mock_verifier.verify.return_value = verified("externalCaller")
        request = make_request(
            {"Authorization": "Bearer 123456789", "User-Identity": "fred@example.com"}
        )

        # Act
        result = await authenticator.check_request(request)

        # Assert
        assert result == Authenticated(
            IdentityContext(user_identity="fred@example.com", caller_identity="externalCaller")
        )
        mock_verifier.verify.assert_awaited_once_with(ServiceCredential("Bearer 123456789"))

    @pytest.mark.asyncio
    async def test_service_token_without_forwarded_user(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        mock_verifier.verify.return_value = verified("externalCaller")

        result = await authenticator.check_request(make_request({"Authorization": "abc123"}))

        assert isinstance(result, Authenticated)
        assert result.context.user_identity == ""
        assert result.context.caller_identity == "externalCaller"

    @pytest.mark.asyncio
    async def test_user_token_identifies_user_and_caller(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        mock_verifier.verify.return_value = verified("fred@example.com")

        result = await authenticator.check_request(make_request({"X-Florence-Token": "user-tok-123456"}))

        assert result == Authenticated(
            IdentityContext(user_identity="fred@example.com", caller_identity="fred@example.com")
        )
        mock_verifier.verify.assert_awaited_once_with(UserCredential("user-tok-123456"))

    @pytest.mark.asyncio
    async def test_user_token_preferred_when_both_present(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        """User token wins and the forwarded identity header is ignored."""
        mock_verifier.verify.return_value = verified("fred@example.com")
        request = make_request(
            {
                "X-Florence-Token": "user-tok",
                "Authorization": "Bearer svc-tok",
                "User-Identity": "someone-else@example.com",
            }
        )

        result = await authenticator.check_request(request)

        assert isinstance(result, Authenticated)
        assert result.context.user_identity == "fred@example.com"
        assert mock_verifier.verify.await_count == 1
        credential = mock_verifier.verify.await_args.args[0]
        assert credential.kind is CredentialKind.USER

    @pytest.mark.asyncio
    async def test_no_credentials_is_rejected_without_verifying(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        result = await authenticator.check_request(make_request({"User-Identity": "fred@example.com"}))

        assert result == Rejected(
            http_status=401, reason=NO_CREDENTIALS_REASON, code="missing_credentials"
        )
        mock_verifier.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_credential_headers_count_as_missing(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        result = await authenticator.check_request(
            make_request({"X-Florence-Token": "", "Authorization": ""})
        )

        assert isinstance(result, Rejected)
        assert result.http_status == 401
        mock_verifier.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_request_is_a_fault(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        result = await authenticator.check_request(None)

        assert isinstance(result, Faulted)
        assert isinstance(result.error, RequestMissingError)
        assert result.http_status == 500
        mock_verifier.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_authority_rejection_propagates(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        rejection = Rejected(http_status=403, reason="unexpected status", code="identity_rejected")
        mock_verifier.verify.return_value = rejection

        result = await authenticator.check_request(make_request({"Authorization": "Bearer x"}))

        assert result is rejection

    @pytest.mark.asyncio
    async def test_verifier_fault_propagates(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        fault = Faulted(MalformedResponseError("bad body"))
        mock_verifier.verify.return_value = fault

        result = await authenticator.check_request(make_request({"X-Florence-Token": "tok"}))

        assert result is fault

    @pytest.mark.asyncio
    async def test_conflicting_forwarded_identity_is_a_fault(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        mock_verifier.verify.return_value = verified("externalCaller")
        request = make_request(
            [
                ("Authorization", "Bearer svc"),
                ("User-Identity", "fred@example.com"),
                ("User-Identity", "mallory@example.com"),
            ]
        )

        result = await authenticator.check_request(request)

        assert isinstance(result, Faulted)
        assert isinstance(result.error, AmbiguousHeaderError)
        assert result.http_status == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", ["X-Florence-Token", "Authorization"])
    async def test_conflicting_credential_header_is_a_fault(
        self, authenticator: RequestAuthenticator, mock_verifier, header: str
    ):
        request = make_request([(header, "Bearer first"), (header, "Bearer second")])

        result = await authenticator.check_request(request)

        assert isinstance(result, Faulted)
        assert isinstance(result.error, AmbiguousHeaderError)
        assert result.error.name == header
        mock_verifier.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_custom_header_names(self, mock_verifier):
        authenticator = RequestAuthenticator(
            _verifier=mock_verifier,
            _headers=HeaderConfig(user_token="X-User", service_token="X-Service", user_identity="X-On-Behalf"),
        )
        mock_verifier.verify.return_value = verified("svc")

        result = await authenticator.check_request(
            make_request({"X-Service": "tok", "X-On-Behalf": "fred@example.com"})
        )

        assert result == Authenticated(IdentityContext(user_identity="fred@example.com", caller_identity="svc"))

    @pytest.mark.asyncio
    async def test_repeated_checks_give_equal_results(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        mock_verifier.verify.return_value = verified("fred@example.com")
        request = make_request({"X-Florence-Token": "tok"})

        first = await authenticator.check_request(request)
        second = await authenticator.check_request(request)

        assert first == second
        assert mock_verifier.verify.await_count == 2

    @pytest.mark.asyncio
    async def test_raw_tokens_are_not_logged(
        self, authenticator: RequestAuthenticator, mock_verifier, caplog: pytest.LogCaptureFixture
    ):
        mock_verifier.verify.return_value = verified("fred@example.com")
        caplog.set_level("INFO")

        await authenticator.check_request(
            make_request({"X-Florence-Token": "very-secret-user-token-abcdef"})
        )

        assert "very-secret" not in caplog.text
        assert "abcdef" in caplog.text


class TestCheckTokenIdentity:
    """Tests for RequestAuthenticator.check_token_identity."""

    @pytest.mark.asyncio
    async def test_returns_identity(self, authenticator: RequestAuthenticator, mock_verifier):
        mock_verifier.verify.return_value = verified("fred@example.com")

        identity = await authenticator.check_token_identity("tok", CredentialKind.USER)

        assert identity == IdentityResponse(identifier="fred@example.com")
        mock_verifier.verify.assert_awaited_once_with(UserCredential("tok"))

    @pytest.mark.asyncio
    async def test_empty_token_raises_without_verifying(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        with pytest.raises(ValidationError, match="Empty token provided"):
            await authenticator.check_token_identity("", CredentialKind.SERVICE)

        mock_verifier.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejection_raises_authentication_error(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        mock_verifier.verify.return_value = Rejected(http_status=404, reason="unexpected status")

        with pytest.raises(AuthenticationError) as exc_info:
            await authenticator.check_token_identity("tok", CredentialKind.SERVICE)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_fault_raises_underlying_error(
        self, authenticator: RequestAuthenticator, mock_verifier
    ):
        error = TransportError("connection refused")
        mock_verifier.verify.return_value = Faulted(error)

        with pytest.raises(TransportError) as exc_info:
            await authenticator.check_token_identity("tok", CredentialKind.SERVICE)

        assert exc_info.value is error


class TestRequireIdentityContext:
    def test_authenticated_unwraps(self) -> None:
        context = IdentityContext(user_identity="u", caller_identity="c")

        assert require_identity_context(Authenticated(context)) is context

    def test_rejected_raises_with_status(self) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            require_identity_context(Rejected(http_status=401, reason=NO_CREDENTIALS_REASON))

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == NO_CREDENTIALS_REASON

    def test_faulted_raises_error(self) -> None:
        with pytest.raises(MalformedResponseError):
            require_identity_context(Faulted(MalformedResponseError("bad")))
