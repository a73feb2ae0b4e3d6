"""Allow ``python -m igris``."""

from igris.cli.commands import app

app(prog_name="igris")
