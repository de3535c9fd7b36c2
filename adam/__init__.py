"""Article catalog browser for language-learning material.

The :mod:`adam.catalog` package holds the filtering and pagination engine;
configuration, the CLI and the HTTP API are thin layers on top of it.
"""

__all__: list[str] = []
