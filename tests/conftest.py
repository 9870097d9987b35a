import sys
from pathlib import Path

# Make the src layout importable when syncemit is not installed
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))
