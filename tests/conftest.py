import pathlib
import sys
import threading
import time

import pytest

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from weatherpoll.core.models import Reading  # noqa: E402
from weatherpoll.errors import FetchError  # noqa: E402


class ScriptedSource:
    """Sample source that replays a script of readings and exceptions.

    Once the script is exhausted it keeps returning ``default`` (or raising
    FetchError when no default is set).
    """

    def __init__(self, script=(), default=None):
        self._script = list(script)
        self._default = default
        self._lock = threading.Lock()
        self.calls = 0

    def fetch(self) -> Reading:
        with self._lock:
            self.calls += 1
            item = self._script.pop(0) if self._script else self._default
        if item is None:
            raise FetchError("no scripted reading")
        if isinstance(item, Exception):
            raise item
        return item


def wait_until(predicate, timeout=2.0, step=0.01) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(step)
    return predicate()


@pytest.fixture
def reading() -> Reading:
    return Reading(temperature=23.5, pressure=1013.2, humidity=45.0)
