import os
import sys
import tempfile
from pathlib import Path

# Ensure repository root is on sys.path for module imports (app, runner, etc.)
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Headless / test mode environment variables
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
# Keep settings.json and score files out of the working tree
os.environ.setdefault("RUNNER_DATA_DIR", tempfile.mkdtemp(prefix="runner-test-"))
os.environ.pop("RUNNER_API_URL", None)
