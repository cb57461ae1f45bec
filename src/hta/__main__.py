"""Allow ``python -m hta``."""

from hta.cli import main

main()
