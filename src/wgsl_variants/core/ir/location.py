"""
Positions of declarations inside a ``.wgslv`` file.

Validation issues point back at the value enum, variant or definition they
concern, and the generated module names the declaration each class came
from.
"""

from __future__ import annotations

from pathlib import PurePath

from pydantic import BaseModel, ConfigDict


class SourceLocation(BaseModel):
    """Where a value enum, case, variant or definition was written.

    Attributes:
        file: Declaration file as passed to the parser
        line: 1-indexed line number
        column: 1-indexed column of the construct's first token
    """

    file: str
    line: int
    column: int

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"

    def anchor(self) -> str:
        """
        Build-independent reference for generated code.

        Drops the directory so output does not depend on where the
        declaration file was compiled from.

        Examples:
            >>> SourceLocation(file="/src/shaders/fractal.wgslv", line=3, column=5).anchor()
            'fractal.wgslv:3'
        """
        return f"{PurePath(self.file).name}:{self.line}"
