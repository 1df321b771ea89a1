import sys
from pathlib import Path

# Ensure `src` is on sys.path so `har_ws_fixtures` imports when not installed editable.
SRC = Path(__file__).resolve().parent.parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
