import sys
from pathlib import Path

# "<repo>/src" first on sys.path so both "axsim" and the "scripts" test helpers import from a checkout
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
