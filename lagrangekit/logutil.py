"""Protocol logger, caller naming and platform identification."""

from __future__ import annotations

import inspect
import logging
import platform as _platform
import time
from pathlib import Path

_SYSTEMS = {"windows": "windows", "linux": "linux", "darwin": "darwin", "freebsd": "freebsd"}

_ARCHES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
}


class Logger:
    """Logs protocol messages with ``%``-style formatting and dumps raw data."""

    def __init__(self, name: str = "lagrangekit", dump_dir: str | Path = "dump",
                 prefix: str = "") -> None:
        self._log = logging.getLogger(name)
        self.dump_dir = Path(dump_dir)
        self.prefix = prefix

    def info(self, format: str, *args: object) -> None:
        self._log.info(self.prefix + format, *args)

    def warning(self, format: str, *args: object) -> None:
        self._log.warning(self.prefix + format, *args)

    def error(self, format: str, *args: object) -> None:
        self._log.error(self.prefix + format, *args)

    def debug(self, format: str, *args: object) -> None:
        self._log.debug(self.prefix + format, *args)

    def dump(self, dumped: bytes, format: str, *args: object) -> Path | None:
        """Write ``dumped`` to a timestamped file and log where it went.

        Returns the file path, or None if the dump directory cannot be made.
        """
        message = format % args if args else format
        try:
            self.dump_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            self._log.error("%s. Failed to dump details", message)
            return None
        dump_file = self.dump_dir / f"{int(time.time())}.dump"
        self._log.error("%s. Details dumped to %s", message, dump_file)
        try:
            dump_file.write_bytes(bytes(dumped))
        except OSError:
            pass
        return dump_file


def get_caller(msg: str) -> str:
    """Prefix ``msg`` with the name of the function that called the caller."""
    stack = inspect.stack(context=0)
    try:
        if len(stack) < 3:
            return "[unkcal] " + msg
        info = stack[2]
        short_module = Path(info.filename).stem
        name = info.function
        full = f"{short_module}.{name}" if short_module else name
        return f"[{full}] {msg}"
    finally:
        del stack


def system() -> str:
    """Return the operating system name in lower case, e.g. ``linux``."""
    name = _platform.system().lower()
    return _SYSTEMS.get(name, name)


def version() -> str:
    """Return the processor architecture, e.g. ``amd64`` or ``arm64``."""
    machine = _platform.machine().lower()
    return _ARCHES.get(machine, machine)