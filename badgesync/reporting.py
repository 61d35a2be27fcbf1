"""Run outputs, secret masking and the failure channel."""

from __future__ import annotations

import sys
import uuid
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from .logging import get_logger


class RunReporter:
    """Collects step outputs and reports them to the CI runner.

    Outputs are kept in memory and, when ``output_file`` is set, appended to
    the runner's ``$GITHUB_OUTPUT`` file as soon as they are known.
    """

    def __init__(
        self,
        output_file: Optional[Path] = None,
        *,
        stream: TextIO | None = None,
    ) -> None:
        self.output_file = output_file
        self.outputs: Dict[str, str] = {}
        self.failures: List[str] = []
        self._stream = stream
        self.logger = get_logger("reporting")

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def set_output(self, name: str, value: object) -> None:
        text = str(value)
        self.outputs[name] = text
        if self.output_file is None:
            return
        with self.output_file.open("a", encoding="utf-8") as handle:
            if "\n" in text:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                handle.write(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")
            else:
                handle.write(f"{name}={text}\n")

    def set_secret(self, value: str) -> None:
        """Ask the runner to mask ``value`` in all subsequent log output."""
        if not value:
            return
        stream = self._stream or sys.stdout
        stream.write(f"::add-mask::{value}\n")
        stream.flush()

    def set_failed(self, message: str) -> None:
        self.failures.append(message)
        self.logger.error(message)


__all__ = ["RunReporter"]
