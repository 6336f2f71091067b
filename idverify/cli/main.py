"""Main CLI application using Cyclopts."""

import cyclopts

from idverify import __version__
from idverify.cli.commands import check, sample

app = cyclopts.App(
    name="idverify",
    help="Identity verification against a remote identity authority",
    version=__version__,
)

app.command(check.app, name="check")
app.command(sample.app, name="sample")


if __name__ == "__main__":
    app()
