import pathlib
import sys

# Ensure src/ and this directory are on path for direct test execution
TESTS = pathlib.Path(__file__).resolve().parent
SRC = TESTS.parent / "src"
for path in (SRC, TESTS):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
