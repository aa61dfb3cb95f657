"""Exception hierarchy for the PNG to RLE565 pipeline.

Every failure raised by a stage derives from Png2RleError so callers can
halt the pipeline with a single except clause. The optional ``stage``
attribute names the pipeline stage that failed; Pipeline fills it in when
the raising code did not.
"""

from __future__ import annotations


class Png2RleError(Exception):
    """Base class for all pipeline failures.

    Attributes:
        stage: Name of the stage that failed, if known
    """

    def __init__(self, message: str, stage: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"{self.stage}: {self.message}"
        return self.message


class DecodeFailed(Png2RleError):
    """The PNG decode step could not produce an RGBA8888 buffer."""


class UnsupportedFormat(Png2RleError):
    """A stage received an image in a pixel format it does not handle."""


class AllocationFailed(Png2RleError):
    """A stream write could not grow its backing buffer."""


class InvalidSeek(Png2RleError):
    """A seek used an unknown mode or targeted a negative offset."""
