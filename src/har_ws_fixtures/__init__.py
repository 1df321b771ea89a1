"""Package initialization for har-ws-fixtures.

Having this file allows relative imports (e.g. `from .models import ...`) to
resolve under tooling (mypy/ruff) and matches the CLI usage pattern
`python -m har_ws_fixtures generate`.
"""

__all__ = []
