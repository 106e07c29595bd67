"""
Project manifest (``wgsl_variants.toml``).

Example:

    [project]
    name = "fractal-studio"
    base_dir = "."

    [preprocessor]
    line_statement_prefix = "#"
    trim_blocks = false

    [[generate]]
    source = "shaders/variants.wgslv"
    output = "fractal_studio/shaders_gen.py"

Relative paths are resolved against the directory holding the manifest.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ResourceError
from .preprocess import JinjaPreprocessor

DEFAULT_MANIFEST_NAME = "wgsl_variants.toml"


@dataclass
class PreprocessorConfig:
    """Settings for the default Jinja2 preprocessor."""

    line_statement_prefix: str | None = "#"
    trim_blocks: bool = False
    lstrip_blocks: bool = False

    def build(self) -> JinjaPreprocessor:
        return JinjaPreprocessor(
            line_statement_prefix=self.line_statement_prefix,
            trim_blocks=self.trim_blocks,
            lstrip_blocks=self.lstrip_blocks,
        )


@dataclass
class GenerateTarget:
    """One declaration file and the Python module generated from it."""

    source: Path
    output: Path


@dataclass
class ProjectManifest:
    """
    Project manifest loaded from wgsl_variants.toml.

    Attributes:
        name: Project name (informational)
        base_dir: Directory template paths in the DSL are relative to
        targets: Declaration files to compile
        preprocessor: Preprocessor settings
    """

    name: str
    base_dir: Path
    targets: list[GenerateTarget] = field(default_factory=list)
    preprocessor: PreprocessorConfig = field(default_factory=PreprocessorConfig)


def load_manifest(path: Path) -> ProjectManifest:
    """
    Load a manifest file.

    Raises:
        ResourceError: If the file cannot be read or is not valid TOML
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceError(f"Cannot read manifest '{path}': {e}", path) from e
    except tomllib.TOMLDecodeError as e:
        raise ResourceError(f"Invalid manifest '{path}': {e}", path) from e

    root = path.parent
    project = data.get("project", {})
    preprocessor_data = data.get("preprocessor", {})

    # An empty prefix disables line statements
    prefix = preprocessor_data.get("line_statement_prefix", "#") or None

    preprocessor_config = PreprocessorConfig(
        line_statement_prefix=prefix,
        trim_blocks=preprocessor_data.get("trim_blocks", False),
        lstrip_blocks=preprocessor_data.get("lstrip_blocks", False),
    )

    targets = []
    for i, target in enumerate(data.get("generate", [])):
        missing = [key for key in ("source", "output") if key not in target]
        if missing:
            raise ResourceError(
                f"Invalid manifest '{path}': generate entry #{i} is missing {', '.join(missing)}",
                path,
            )
        targets.append(
            GenerateTarget(source=root / target["source"], output=root / target["output"])
        )

    return ProjectManifest(
        name=project.get("name", "unnamed"),
        base_dir=root / project.get("base_dir", "."),
        targets=targets,
        preprocessor=preprocessor_config,
    )
