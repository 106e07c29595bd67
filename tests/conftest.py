"""Shared pytest fixtures for wgsl-variants tests."""

from __future__ import annotations

import itertools
import sys
import types
from collections.abc import Mapping
from pathlib import Path

import pytest

from wgsl_variants.core import ir

SCENARIO_DSL = """
value_enum LEVEL: u32 { Low = 0, High = 10 }

pub variants Shader from "t.wgsl" {
    shared { DEBUG: bool = false },
    Fast(LEVEL),
}
"""

FRACTAL_DSL = """
// Fractal family selector
pub value_enum VARIANT as Variant: u32 {
    Mandelbrot = 0,
    BurningShip = 2,
}

pub value_enum MULTI as Multi: bool { Disabled = false, Enabled = true }

value_enum COLOR_MODE as ColorMode: i32 {
    Smooth = -1,
    Banded = 0x10,
    Flat = 1_000,
}

pub variants FractalShader from "fractal.wgsl" {
    shared { DEBUG: bool = false, ITERATIONS: u32 = 64 },
    Preview { ITERATIONS: u32 = 16 },
    Debug { DEBUG: bool = true },
    Product(Variant, Multi),
}
"""

FRACTAL_TEMPLATE = """\
fn main() {
#if DEBUG
    let color = debug_color();
#else
    let color = shade({{ ITERATIONS }}u);
#endif
}
"""


class RecordingPreprocessor:
    """Preprocessor double that records every definitions map it receives."""

    def __init__(self, fail_on: Mapping[str, object] | None = None):
        self.calls: list[dict[str, ir.DefValue]] = []
        self.fail_on = dict(fail_on or {})

    def preprocess(self, template: str, definitions: Mapping[str, ir.DefValue]) -> str:
        self.calls.append(dict(definitions))
        for key, value in self.fail_on.items():
            if key in definitions and definitions[key].value == value:
                raise RuntimeError(f"cannot expand {key}={value}")
        rendered = ", ".join(f"{k}={v}" for k, v in sorted(definitions.items()))
        return f"{template}// {rendered}\n"

    def plain_calls(self) -> list[dict[str, bool | int]]:
        """Recorded definitions with the DefValue wrappers stripped."""
        return [{k: v.value for k, v in call.items()} for call in self.calls]


@pytest.fixture
def recorder() -> RecordingPreprocessor:
    """Return a fresh recording preprocessor."""
    return RecordingPreprocessor()


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Create a base directory holding the templates used by the sample DSL."""
    (tmp_path / "t.wgsl").write_text("// scenario\n")
    (tmp_path / "fractal.wgsl").write_text(FRACTAL_TEMPLATE)
    return tmp_path


_module_ids = itertools.count()


@pytest.fixture
def load_generated():
    """
    Return a loader that executes generated source as a real module.

    The module is registered in sys.modules while the test runs, since
    dataclasses resolve string annotations through it.
    """
    names: list[str] = []

    def load(source: str) -> types.ModuleType:
        name = f"_wgsl_variants_generated_{next(_module_ids)}"
        module = types.ModuleType(name)
        sys.modules[name] = module
        names.append(name)
        exec(compile(source, f"<{name}>", "exec"), module.__dict__)
        return module

    yield load

    for name in names:
        sys.modules.pop(name, None)


@pytest.fixture
def scenario_dsl() -> str:
    """Single cross-product over a two-case u32 enum, with a shared DEBUG flag."""
    return SCENARIO_DSL


@pytest.fixture
def fractal_dsl() -> str:
    """Aliased enums of every kind, hardcoded variants and a cross product."""
    return FRACTAL_DSL
