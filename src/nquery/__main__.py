"""Allow ``python -m nquery``."""

from .cli.main import main

main()
