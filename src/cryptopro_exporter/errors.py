"""Exceptions raised while extracting facts from CryptoPro tools."""

from typing import Optional, Sequence

# Raw tool output attached to errors is cut to this many characters
OUTPUT_LIMIT = 500


def truncate(text: Optional[str], limit: int = OUTPUT_LIMIT) -> str:
    """Shorten tool output so it can be safely written to logs."""
    if not text:
        return ""
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


class ExporterError(Exception):
    """Base exception for failed extractions."""
    pass


class CommandError(ExporterError):
    """External tool could not be run or exited with failure."""

    def __init__(
        self,
        message: str,
        command: Sequence[str] = (),
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = truncate(stderr)

    @property
    def output(self) -> str:
        return self.stderr


class ParseError(ExporterError):
    """Tool ran, but its output did not match any recognized pattern."""

    def __init__(self, message: str, output: Optional[str] = None):
        super().__init__(message)
        self.output = truncate(output)
