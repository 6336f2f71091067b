"""Show the redacted summary of a token."""

import cyclopts

from idverify.cli.console import get_console
from idverify.domain.identity.model.sample import sample_token

app = cyclopts.App(name="sample", help="Show what a token looks like in logs")


@app.default
def sample(token: str, /) -> None:
    """Print the redacted summary logged for TOKEN.

    Args:
        token: Raw credential, bearer prefix optional.
    """
    get_console().token_sample(sample_token(token))
