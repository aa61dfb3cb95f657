"""Stage base class for pipeline transformations.

A stage consumes one image and produces a new one. It declares the pixel
format it accepts and the one it produces, so a pipeline can refuse to run
a stage on an image it cannot handle instead of letting it fail halfway.

Example:
    >>> class Invert(Stage):
    ...     def accepts(self):
    ...         return PixelFormat.RGB888
    ...     def produces(self):
    ...         return PixelFormat.RGB888
    ...     def run(self, image, log):
    ...         pix = bytes(255 - v for v in image.pix)
    ...         return RGB888Image(width=image.width, height=image.height, pix=pix)
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from png2rle.components.image import Image, PixelFormat
from png2rle.core.log import Log


class Stage(ABC):
    """Base class for all pipeline stages.

    Stages declare:
    - accepts(): The pixel format of their input
    - produces(): The pixel format of their output
    - run(): The conversion itself
    """

    @property
    def name(self) -> str:
        """Name used in diagnostics."""
        return type(self).__name__

    @abstractmethod
    def accepts(self) -> PixelFormat:
        """Return the pixel format this stage consumes."""

    @abstractmethod
    def produces(self) -> PixelFormat:
        """Return the pixel format this stage creates."""

    @abstractmethod
    def run(self, image: Image, log: Log) -> Image:
        """Convert ``image`` into a new image.

        Args:
            image: Input image in the accepted format
            log: Logging capability for diagnostics

        Returns:
            New image in the produced format

        Raises:
            Png2RleError: On any failure; no partial output is returned
        """

    def can_run(self, image: Image) -> bool:
        """Check if ``image`` is in the format this stage accepts."""
        return image.format == self.accepts()

    def __repr__(self) -> str:
        return f"{self.name}({self.accepts().value} -> {self.produces().value})"
