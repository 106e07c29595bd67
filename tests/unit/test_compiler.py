"""
End-to-end tests for the compiler driver.

Generated modules are exec'd and exercised the way a host application
would use them.
"""

from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from wgsl_variants.core.compiler import compile_file, compile_source
from wgsl_variants.core.errors import (
    ParseError,
    PreprocessingError,
    ResourceError,
    ValidationError,
)
from wgsl_variants.core.ir import U32_MAX


class TestScenarios:
    def test_cross_product_with_shared(self, scenario_dsl, template_dir, recorder, load_generated):
        source = compile_source(scenario_dsl, base_dir=template_dir, preprocessor=recorder)

        assert recorder.plain_calls() == [
            {"DEBUG": False, "LEVEL": 0},
            {"DEBUG": False, "LEVEL": 10},
        ]

        generated = load_generated(source)
        Shader, LEVEL = generated.Shader, generated.LEVEL
        assert Shader.cases() == (Shader.Fast(LEVEL.Low), Shader.Fast(LEVEL.High))
        assert Shader.Fast(LEVEL.Low).get_shader().endswith("DEBUG=false, LEVEL=0u32\n")
        assert Shader.Fast(LEVEL.High).get_shader().endswith("DEBUG=false, LEVEL=10u32\n")

    def test_second_enum_varies_fastest(self, template_dir, recorder, load_generated):
        dsl = """
        value_enum A: u32 { A0 = 0, A1 = 1 }
        value_enum B: u32 { B0 = 0, B1 = 1, B2 = 2 }
        variants S from "t.wgsl" { Grid(A, B) }
        """
        generated = load_generated(
            compile_source(dsl, base_dir=template_dir, preprocessor=recorder)
        )

        cases = generated.S.cases()
        assert [(c.a.get_value(), c.b.get_value()) for c in cases] == [
            (0, 0),
            (0, 1),
            (0, 2),
            (1, 0),
            (1, 1),
            (1, 2),
        ]
        assert [call["B"].value for call in recorder.calls] == [0, 1, 2, 0, 1, 2]

    def test_undeclared_enum_generates_nothing(self, template_dir, recorder):
        dsl = 'variants Shader from "t.wgsl" { Fast(QUALITY) }'

        with pytest.raises(ValidationError) as exc_info:
            compile_source(dsl, base_dir=template_dir, preprocessor=recorder)

        (issue,) = exc_info.value.issues
        assert (issue.variant, issue.missing_enum) == ("Fast", "QUALITY")
        assert recorder.calls == []


class TestGeneratedModule:
    @pytest.fixture
    def fractal(self, fractal_dsl, template_dir, load_generated):
        return load_generated(compile_source(fractal_dsl, Path("fractal.wgslv"), template_dir))

    def test_hardcoded_variants_use_shared_fallback(self, fractal):
        shader = fractal.FractalShader
        preview = shader.Preview().get_shader()
        debug = shader.Debug().get_shader()

        assert "shade(16u)" in preview
        assert "debug_color" not in preview
        assert "debug_color" in debug
        assert "shade(" not in debug

    def test_cases_in_enumeration_order(self, fractal):
        shader, variant, multi = fractal.FractalShader, fractal.Variant, fractal.Multi
        assert shader.cases() == (
            shader.Preview(),
            shader.Debug(),
            shader.Product(variant.Mandelbrot, multi.Disabled),
            shader.Product(variant.Mandelbrot, multi.Enabled),
            shader.Product(variant.BurningShip, multi.Disabled),
            shader.Product(variant.BurningShip, multi.Enabled),
        )

    def test_every_case_has_a_source(self, fractal):
        for case in fractal.FractalShader.cases():
            assert "fn main()" in case.get_shader()

    def test_raw_shader_is_unprocessed_template(self, fractal):
        raw = fractal.FractalShader.get_raw_shader()
        assert "#if DEBUG" in raw
        assert "{{ ITERATIONS }}" in raw
        assert fractal.FractalShader.TEMPLATE_PATH == "fractal.wgsl"

    def test_case_classes(self, fractal):
        product = fractal.FractalShader.Product(fractal.Variant.BurningShip, fractal.Multi.Enabled)

        assert fractal.FractalShader.Product is fractal.FractalShaderProduct
        assert isinstance(product, fractal.FractalShader)
        assert product.variant is fractal.Variant.BurningShip
        assert product.multi is fractal.Multi.Enabled
        with pytest.raises(AttributeError):
            product.multi = fractal.Multi.Disabled

    def test_value_enum_accessors(self, fractal):
        assert fractal.Variant.BurningShip.get_value() == 2
        assert fractal.Variant.from_value(2) is fractal.Variant.BurningShip
        assert fractal.Multi.from_value(True) is fractal.Multi.Enabled
        assert fractal.ColorMode.from_value(-1) is fractal.ColorMode.Smooth
        assert fractal.ColorMode.from_value(16) is fractal.ColorMode.Banded
        assert fractal.Variant.cases() == (fractal.Variant.Mandelbrot, fractal.Variant.BurningShip)

    def test_from_value_rejects_undeclared_values(self, fractal):
        with pytest.raises(ValueError, match="no matching case of Variant for 1"):
            fractal.Variant.from_value(1)

    @pytest.mark.parametrize(
        "enum_name,value",
        [("Variant", True), ("Variant", False), ("Multi", 1), ("Multi", 0), ("Variant", 2.0)],
    )
    def test_from_value_rejects_wrong_kind(self, fractal, enum_name, value):
        with pytest.raises(ValueError, match="no matching case"):
            getattr(fractal, enum_name).from_value(value)

    def test_shader_cases_order_by_enumeration(self, fractal):
        shader, variant, multi = fractal.FractalShader, fractal.Variant, fractal.Multi
        cases = shader.cases()

        assert sorted(reversed(cases)) == list(cases)
        assert shader.Debug() < shader.Product(variant.Mandelbrot, multi.Disabled)
        assert shader.Product(variant.BurningShip, multi.Enabled) >= shader.Preview()
        assert max(cases) == shader.Product(variant.BurningShip, multi.Enabled)

    def test_value_enums_order_by_declaration(self, fractal):
        assert fractal.Variant.Mandelbrot < fractal.Variant.BurningShip
        assert fractal.Multi.Enabled > fractal.Multi.Disabled
        assert sorted(reversed(fractal.Variant.cases())) == list(fractal.Variant.cases())

    def test_value_enum_order_ignores_literals(self, load_generated):
        generated = load_generated(compile_source("value_enum Level: u32 { High = 10, Low = 0 }"))
        assert generated.Level.High < generated.Level.Low
        assert min(generated.Level.cases()) is generated.Level.High

    def test_ordering_across_types_is_an_error(self, fractal):
        with pytest.raises(TypeError):
            fractal.Variant.Mandelbrot < fractal.Multi.Disabled
        with pytest.raises(TypeError):
            fractal.FractalShader.Preview() < fractal.Variant.Mandelbrot

    def test_exports_only_public_declarations(self, fractal):
        assert "Variant" in fractal.__all__
        assert "FractalShaderProduct" in fractal.__all__
        assert "ColorMode" not in fractal.__all__
        assert hasattr(fractal, "ColorMode")


class TestDeterminism:
    def test_byte_identical_output(self, fractal_dsl, template_dir):
        first = compile_source(fractal_dsl, Path("fractal.wgslv"), template_dir)
        second = compile_source(fractal_dsl, Path("fractal.wgslv"), template_dir)
        assert first == second

    def test_no_absolute_paths_in_output(self, fractal_dsl, template_dir):
        source = compile_source(fractal_dsl, template_dir / "fractal.wgslv", template_dir)
        assert str(template_dir) not in source
        assert "Shader variants generated from fractal.wgslv." in source


class TestCompilerErrors:
    def test_missing_template(self, scenario_dsl, tmp_path):
        with pytest.raises(ResourceError) as exc_info:
            compile_source(scenario_dsl, base_dir=tmp_path)
        assert exc_info.value.path == tmp_path / "t.wgsl"

    def test_missing_declaration_file(self, tmp_path):
        with pytest.raises(ResourceError, match="Cannot read declaration file"):
            compile_file(tmp_path / "absent.wgslv")

    def test_parse_errors_carry_file(self, tmp_path):
        dsl_file = tmp_path / "broken.wgslv"
        dsl_file.write_text("value_enum A: u32 { X = true }")

        with pytest.raises(ParseError) as exc_info:
            compile_file(dsl_file, tmp_path)
        assert exc_info.value.context.file == dsl_file

    def test_preprocessor_failure_names_combination(self, scenario_dsl, template_dir, recorder):
        recorder.fail_on["LEVEL"] = 10

        with pytest.raises(PreprocessingError) as exc_info:
            compile_source(scenario_dsl, base_dir=template_dir, preprocessor=recorder)

        error = exc_info.value
        assert (error.declaration, error.variant, error.combination_index) == ("Shader", "Fast", 1)

    def test_jinja_undefined_definition(self, template_dir):
        (template_dir / "t.wgsl").write_text("#if QUALITY\nx\n#endif\n")

        with pytest.raises(PreprocessingError, match="QUALITY"):
            compile_source(
                'variants S from "t.wgsl" { A { DEBUG: bool = true } }', base_dir=template_dir
            )

    def test_empty_declaration_compiles(self, template_dir, load_generated):
        generated = load_generated(
            compile_source('variants Empty from "t.wgsl" { }', base_dir=template_dir)
        )
        assert generated.Empty.cases() == ()
        assert generated.Empty.get_raw_shader() == "// scenario\n"


class TestValueEnumProperties:
    @given(
        st.lists(st.integers(min_value=0, max_value=U32_MAX), min_size=1, max_size=8, unique=True),
        st.integers(min_value=0, max_value=U32_MAX),
    )
    @settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_from_value_inverts_get_value(self, load_generated, values: list[int], other: int):
        """Invariant: from_value(get_value(c)) is c, and only declared values resolve."""
        cases = ", ".join(f"C{i} = {v}" for i, v in enumerate(values))
        generated = load_generated(compile_source(f"value_enum Level: u32 {{ {cases} }}"))
        level = generated.Level

        assert [c.get_value() for c in level.cases()] == values
        for case in level.cases():
            assert level.from_value(case.get_value()) is case

        if other not in values:
            with pytest.raises(ValueError, match="no matching case of Level"):
                level.from_value(other)
