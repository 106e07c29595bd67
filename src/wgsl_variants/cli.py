"""
wgsl-variants CLI.

Host build tooling around the compiler core:

- build: compile every [[generate]] target of wgsl_variants.toml
- generate: compile a single declaration file
- check: parse and validate, print a summary
- cases: list every concrete case a declaration file expands to
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from wgsl_variants import __version__
from wgsl_variants.core import ir
from wgsl_variants.core.compiler import compile_file, load_module, read_text_file
from wgsl_variants.core.enumerator import count_cases, enumerate_combinations, resolve_cross_product
from wgsl_variants.core.errors import VariantsError
from wgsl_variants.core.manifest import DEFAULT_MANIFEST_NAME, load_manifest

app = typer.Typer(
    help="""wgsl-variants – shader variant code generator

Compiles value_enum / variants declarations into a Python module with a
closed set of shader variant types and their preprocessed WGSL sources.
""",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"wgsl-variants {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", help="Log every generated case"),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Global options."""
    if verbose:
        level = logging.DEBUG
    else:
        log_level = os.getenv("LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _fail(error: VariantsError) -> typer.Exit:
    typer.echo(f"{type(error).__name__}: {error}", err=True)
    return typer.Exit(code=1)


@app.command()
def build(
    manifest: Path = typer.Option(
        Path(DEFAULT_MANIFEST_NAME), "--manifest", "-m", help="Path to wgsl_variants.toml"
    ),
) -> None:
    """
    Compile every target listed in the manifest.

    Outputs are only written once every target compiled successfully.
    """
    try:
        mf = load_manifest(manifest)
        preprocessor = mf.preprocessor.build()
        outputs = []
        for target in mf.targets:
            source = compile_file(target.source, mf.base_dir, preprocessor)
            outputs.append((target.output, source))
    except VariantsError as e:
        raise _fail(e) from e

    for path, source in outputs:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        console.print(f"[green]✓[/green] Generated {path}")

    if not outputs:
        typer.echo("No [[generate]] targets in manifest")


@app.command()
def generate(
    source: Path = typer.Argument(..., help="Declaration file (*.wgslv)"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output Python module (default: stdout)"
    ),
    base_dir: Path | None = typer.Option(
        None, "--base-dir", "-b", help="Directory template paths are relative to (default: cwd)"
    ),
) -> None:
    """Compile one declaration file into a Python module."""
    try:
        generated = compile_file(source, base_dir)
    except VariantsError as e:
        raise _fail(e) from e

    if output is None:
        typer.echo(generated, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(generated, encoding="utf-8")
    console.print(f"[green]✓[/green] Generated {output}")


def _load(source: Path) -> ir.VariantsModule:
    text = read_text_file(source, "declaration file")
    return load_module(text, source)


@app.command()
def check(
    source: Path = typer.Argument(..., help="Declaration file (*.wgslv)"),
) -> None:
    """Parse and validate a declaration file without reading templates."""
    try:
        module = _load(source)
    except VariantsError as e:
        raise _fail(e) from e

    table = Table(title=str(source))
    table.add_column("Declaration")
    table.add_column("Kind")
    table.add_column("Cases", justify="right")

    for value_enum in module.value_enums:
        table.add_row(
            value_enum.type_name, f"value_enum ({value_enum.kind.value})", str(len(value_enum.values))
        )
    for decl in module.variants_decls:
        table.add_row(decl.name, f"variants ← {decl.template_path}", str(count_cases(module, decl)))

    console.print(table)
    console.print("[green]✓[/green] Declarations are valid")


@app.command()
def cases(
    source: Path = typer.Argument(..., help="Declaration file (*.wgslv)"),
) -> None:
    """List every concrete case with the definitions it is preprocessed with."""
    try:
        module = _load(source)
    except VariantsError as e:
        raise _fail(e) from e

    for decl in module.variants_decls:
        typer.echo(f"{decl.name}:")
        shared = decl.shared_definitions()
        for variant in decl.variants:
            if isinstance(variant, ir.HardCodedVariant):
                definitions = dict(shared)
                definitions.update({d.key: d.value for d in variant.definitions})
                typer.echo(f"  {variant.name}  {_format_definitions(definitions)}")
                continue
            for combination in enumerate_combinations(resolve_cross_product(module, variant)):
                typer.echo(
                    f"  {variant.name}({combination.label()})  "
                    f"{_format_definitions(combination.definitions(shared))}"
                )


def _format_definitions(definitions: dict[str, ir.DefValue]) -> str:
    return "{" + ", ".join(f"{k}: {v}" for k, v in definitions.items()) + "}"


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


__all__ = ["app", "main"]
