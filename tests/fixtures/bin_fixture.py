"""Test program whose behaviour is driven by environment variables.

stdout / stderr: text written (with a trailing newline) to each stream
exit: exit code (default 0)
signal: signal number to kill itself with instead of exiting
"""

import os
import signal
import sys


def main() -> int:
    if "stdout" in os.environ:
        sys.stdout.write(os.environ["stdout"] + "\n")
    if "stderr" in os.environ:
        sys.stderr.write(os.environ["stderr"] + "\n")
    sys.stdout.flush()
    sys.stderr.flush()

    if "signal" in os.environ:
        os.kill(os.getpid(), int(os.environ["signal"]))
        signal.pause()

    return int(os.environ.get("exit", "0"))


if __name__ == "__main__":
    sys.exit(main())
