"""Pipeline: a strict chain of stages.

Stages run in order, each on the output of the previous one. The first
failure stops the chain: later stages never see an image that a failed
stage did not produce.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from png2rle.core.errors import Png2RleError, UnsupportedFormat
from png2rle.core.log import Log, get_log

if TYPE_CHECKING:
    from png2rle.components.image import Image
    from png2rle.core.stage import Stage


class Pipeline:
    """Fluent pipeline builder.

    Stages are added with `.to()` or the pipe operator `|` and executed with
    `.run()`.

    Example:
        >>> rle = (
        ...     Pipeline()
        ...     .to(RGBAToRGB())
        ...     .to(RLEEncode())
        ...     .run(rgba_image)
        ... )
    """

    def __init__(self, log: Log | None = None) -> None:
        """Initialize an empty pipeline.

        Args:
            log: Logging capability shared by all stages
        """
        self.log = get_log(log)
        self.stages: list[Stage] = []

    def to(self, stage: "Stage") -> "Pipeline":
        """Append ``stage`` and return self for chaining."""
        self.stages.append(stage)
        return self

    def __or__(self, stage: "Stage") -> "Pipeline":
        """Pipe operator, equivalent to `.to(stage)`."""
        return self.to(stage)

    def run(self, image: "Image") -> "Image":
        """Run every stage in order.

        Args:
            image: Input of the first stage

        Returns:
            Output of the last stage (``image`` itself if there are none)

        Raises:
            UnsupportedFormat: If a stage does not accept its input format
            Png2RleError: Any failure raised by a stage, tagged with its name
        """
        for stage in self.stages:
            if not stage.can_run(image):
                error = UnsupportedFormat(
                    f"expects {stage.accepts().value} input, got {image.format.value}",
                    stage=stage.name,
                )
                self.log.error("%s", error)
                raise error

            try:
                image = stage.run(image, self.log)
            except Png2RleError as e:
                if e.stage is None:
                    e.stage = stage.name
                self.log.error("%s", e)
                raise

        return image

    def __repr__(self) -> str:
        chain = " | ".join(stage.name for stage in self.stages)
        return f"Pipeline({chain})"
