"""Allow ``python -m intelsearch.cli`` execution (runs the search CLI)."""

from intelsearch.cli.search import main

main()
