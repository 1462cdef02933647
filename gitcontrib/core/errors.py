"""Exception hierarchy shared by the chart engine, data sources and CLI."""

from __future__ import annotations


class GitContribError(Exception):
    """Base exception for gitcontrib errors."""
    pass


class ConfigurationError(GitContribError):
    """Conflicting or invalid chart options."""
    pass


class DataFormatError(GitContribError):
    """Input rows could not be parsed into a consistent series model."""

    def __init__(
        self, message: str, line_number: int | None = None, line: str | None = None
    ):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
            if line is not None:
                message = f"{message} ({line!r})"
        super().__init__(message)


class ExternalProcessError(GitContribError):
    """An external program (git, gnuplot) failed or could not be started."""

    def __init__(self, message: str, command: list[str], returncode: int | None = None):
        self.command = command
        self.returncode = returncode
        super().__init__(message)
