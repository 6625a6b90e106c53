"""Allow ``python -m walkgen``."""

from .cli import app

app(prog_name="walkgen")
