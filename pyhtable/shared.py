import sys
from typing import Any


def printf(format: str, *args: Any):
    print(format.format(*args), end="")


def printf_err(format: str, *args: Any):
    # resolved per call so redirected streams are honoured
    print(format.format(*args), end="", file=sys.stderr)
