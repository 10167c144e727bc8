# stdlib
from pathlib import Path
from datetime import datetime
from typing import Optional
from types import TracebackType
# projectlib
from battery_trends.utils.paths import validate_directory
from battery_trends.utils.typing import Verbosity, Address

class Logger(object):
    """
    Callable, verbosity-gated logger for the trend pipeline.

    Messages are prefixed with a timestamp and the name of the stage
    that emitted them, then either printed to stdout or appended to
    ``log.txt`` inside ``log_dir``.
    """

    def __init__(
        self,
        verbose: Verbosity = 0,
        log_dir: Address = Path.cwd(),
        write_log: bool = False,
        *,
        name: Optional[str] = None,
    ) -> None:
        """
        Initialize the logger.

        Parameters
        ----------
        verbose : Verbosity, default 0
            Verbosity threshold. Messages with a verbosity level less
            than or equal to this value are emitted.
        log_dir : Address, default Path.cwd()
            Directory holding ``log.txt`` when `write_log` is True.
        write_log : bool, default False
            If True, messages are appended to the log file instead of
            being printed.
        name : str, optional
            Stage name included in every formatted message.
        """
        self.verbose = verbose
        self.name = name
        self.write_log = write_log
        self.log_path = validate_directory(log_dir) / "log.txt"

    def __call__(self, msg: str, verbosity: int = 0) -> None:
        """
        Emit `msg` if ``self.verbose >= verbosity``.

        Allows usage such as ``logger("resampled 120 points", 1)``.
        """
        if self.verbose >= verbosity:
            formatted = self._format(msg)
            if self.write_log:
                self.write(formatted)
            else:
                print(formatted)

    def child(self, name: str) -> "Logger":
        """Return a logger sharing this one's settings under `name`."""
        return Logger(
            self.verbose,
            self.log_path.parent,
            self.write_log,
            name=name
        )

    def write(self, msg: str) -> None:
        """Append a formatted message to the log file."""
        with open(self.log_path, "a", encoding="utf-8") as file:
            file.write(msg + "\n")

    def _format(self, msg: str) -> str:
        ts = datetime.now().isoformat(timespec="seconds")
        if self.name:
            return f"[{ts}] [{self.name}] {msg}"
        return f"[{ts}] {msg}"

    def __enter__(self) -> "Logger":
        return self

    def __exit__(
            self,
            exc_type: Optional[type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
        ) -> None:
        pass
