"""Command-line tools for intelsearch.

- ``python -m intelsearch.cli.search`` -- run one hybrid search and print
  a result table or the JSON response.
"""
