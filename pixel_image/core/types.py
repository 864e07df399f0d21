"""Shared types for the pixel-image tool: Operation and Report."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pixel_image.core.image import Image


class Operation:
    """A self-registering image operation.

    Usage in an operation module:

        operation = Operation(name='invert', help='Invert colour channels')

        @operation.run
        def run(image, report, args):
            ...
            return result_image  # or None when nothing is written
    """

    def __init__(self, name: str, help: str = '', needs_other: bool = False):
        self.name = name
        self.help = help
        self.needs_other = needs_other
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def execute(self, image: Image, report: Report, args: Any) -> Image | None:
        if self._run_fn is None:
            raise RuntimeError(f'Operation {self.name} has no run function')
        return self._run_fn(image, report, args)


@dataclass
class Report:
    """Accumulates what each operation found or produced, for text/JSON output."""

    image_path: str = ''
    image_format: str = ''
    sample: str = ''
    width: int = 0
    height: int = 0
    output_path: str | None = None
    results: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def for_image(cls, path: str, image: Image) -> Report:
        return cls(
            image_path=path,
            image_format=image.fmt.name,
            sample=image.sample.name,
            width=image.width,
            height=image.height,
        )

    def add(self, operation_name: str, data: dict[str, Any]) -> None:
        self.results.setdefault(operation_name, {}).update(data)
