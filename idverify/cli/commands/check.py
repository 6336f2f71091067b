"""Check credentials against the identity authority."""

import asyncio
import sys

import cyclopts
import httpx
import logfire
import pydantic
import yaml
from rich.markup import escape

from idverify.application.di import create_container
from idverify.cli.console import get_console
from idverify.config import Config, configure_logging
from idverify.domain.identity.model.outcome import Authenticated, AuthResult, Rejected
from idverify.domain.identity.service.authenticator import RequestAuthenticator
from idverify.domain.shared.error import ConfigurationError
from idverify.util.headers import set_service_auth_token, set_user_auth_token, set_user_identity

app = cyclopts.App(name="check", help="Authenticate a set of credentials")

EXIT_AUTHENTICATED = 0
EXIT_REJECTED = 1
EXIT_FAULTED = 2


def _load_config(url: str | None) -> Config:
    """Load Config, applying the --url override.

    Raises:
        ConfigurationError: If the environment or the YAML file holds invalid values
    """
    try:
        config = Config()
    except (pydantic.ValidationError, yaml.YAMLError) as e:
        raise ConfigurationError(f"invalid configuration: {e}") from e
    if url:
        authority = config.authority.model_copy(update={"url": url})
        config = config.model_copy(update={"authority": authority})
    return config


async def _authenticate(config: Config, headers: dict[str, str]) -> AuthResult:
    container = create_container(config)
    try:
        authenticator = await container.get(RequestAuthenticator)
        # Headers are presented exactly as an inbound request would carry them
        request = httpx.Request("GET", "http://localhost/", headers=headers)
        return await authenticator.check_request(request)
    finally:
        await container.close()


@app.default
def check(
    *,
    user_token: str | None = None,
    service_token: str | None = None,
    user_identity: str | None = None,
    url: str | None = None,
) -> None:
    """Resolve the identities a request with these headers would get.

    Exits 0 when authenticated, 1 when rejected and 2 on a fault.

    Args:
        user_token: Value for the user token header.
        service_token: Value for the service token header.
        user_identity: Forwarded user identity, used with a service token.
        url: Identity authority base URL. Overrides configuration.
    """
    console = get_console()
    try:
        config = _load_config(url)
    except ConfigurationError as e:
        console.error(escape(e.message), hint="Check the IDV_* environment variables and IDV_CONFIG_FILE")
        sys.exit(EXIT_FAULTED)

    configure_logging(config.logging)
    logfire.configure(send_to_logfire="if-token-present", console=False)

    headers: dict[str, str] = {}
    set_user_auth_token(headers, user_token or "", header_name=config.headers.user_token)
    set_service_auth_token(headers, service_token or "", header_name=config.headers.service_token)
    set_user_identity(headers, user_identity or "", header_name=config.headers.user_identity)

    console.info(f"Checking credentials against {config.authority.identity_url}")

    result = asyncio.run(_authenticate(config, headers))

    if isinstance(result, Authenticated):
        console.success("Authenticated")
        console.identity_context(result.context)
        sys.exit(EXIT_AUTHENTICATED)

    if isinstance(result, Rejected):
        console.error(
            f"Rejected ({result.http_status}): {result.reason}",
            hint="Pass --user-token or --service-token" if result.code == "missing_credentials" else None,
        )
        sys.exit(EXIT_REJECTED)

    console.error(
        f"Identity check failed: {escape(result.error.message)}",
        hint=f"error code: {result.error.code}",
    )
    sys.exit(EXIT_FAULTED)
