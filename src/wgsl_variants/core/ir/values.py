"""
Scalar kinds and shader definition values.

A definition value is the tagged union ``Bool(bool) | Int(i32) | UInt(u32)``
handed to the preprocessor and bound to every value-enum case.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, model_validator

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1
U32_MAX = 2**32 - 1


class ScalarKind(str, Enum):
    """Scalar types a definition or value enum may carry."""

    BOOL = "bool"
    I32 = "i32"
    U32 = "u32"

    @property
    def python_type(self) -> str:
        """Name of the Python type values of this kind map to."""
        return "bool" if self is ScalarKind.BOOL else "int"

    def check(self, value: bool | int) -> str | None:
        """
        Check that a Python value fits this kind.

        Returns:
            None when the value fits, otherwise a description of the problem
        """
        if self is ScalarKind.BOOL:
            if not isinstance(value, bool):
                return f"expected a bool literal, got {value!r}"
            return None

        if isinstance(value, bool) or not isinstance(value, int):
            return f"expected an integer literal, got {value!r}"
        if self is ScalarKind.I32 and not I32_MIN <= value <= I32_MAX:
            return f"{value} is out of range for i32"
        if self is ScalarKind.U32 and not 0 <= value <= U32_MAX:
            return f"{value} is out of range for u32"
        return None


class DefValue(BaseModel):
    """
    A typed shader definition value.

    Attributes:
        kind: Scalar kind tag
        value: Python value (bool for BOOL, int otherwise)
    """

    kind: ScalarKind
    value: StrictBool | StrictInt

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_value_fits_kind(self) -> DefValue:
        problem = self.kind.check(self.value)
        if problem:
            raise ValueError(problem)
        return self

    @classmethod
    def bool_(cls, value: bool) -> DefValue:
        return cls(kind=ScalarKind.BOOL, value=value)

    @classmethod
    def int_(cls, value: int) -> DefValue:
        return cls(kind=ScalarKind.I32, value=value)

    @classmethod
    def uint(cls, value: int) -> DefValue:
        return cls(kind=ScalarKind.U32, value=value)

    def literal(self) -> str:
        """Python source literal for this value."""
        return repr(self.value)

    def __str__(self) -> str:
        if self.kind is ScalarKind.BOOL:
            return "true" if self.value else "false"
        return f"{self.value}{self.kind.value}"
