# Ensure '<repo>/backend' is on sys.path so 'import eduvibe' and
# 'import tests.helpers' work whether pytest runs from the repo root or backend/.
from pathlib import Path
import sys

_BACKEND_DIR = Path(__file__).resolve().parent
if str(_BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(_BACKEND_DIR))
