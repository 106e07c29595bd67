"""Tests for the preprocessing bridge and the Jinja2 preprocessor."""

import pytest

from wgsl_variants.core import ir
from wgsl_variants.core.errors import PreprocessingError
from wgsl_variants.core.preprocess import JinjaPreprocessor, PreprocessingBridge, Preprocessor

SHARED = {"DEBUG": ir.DefValue.bool_(False), "ITERATIONS": ir.DefValue.uint(64)}


def make_bridge(preprocessor) -> PreprocessingBridge:
    return PreprocessingBridge(preprocessor, "template", declaration="Shader", shared=SHARED)


class TestBridgeDefinitions:
    def test_variant_overrides_win(self, recorder):
        bridge = make_bridge(recorder)
        bridge.begin_variant("Loud")
        bridge.process({"DEBUG": ir.DefValue.bool_(True)})

        assert recorder.plain_calls() == [{"DEBUG": True, "ITERATIONS": 64}]

    def test_omitted_keys_fall_back_to_shared(self, recorder):
        bridge = make_bridge(recorder)
        bridge.begin_variant("Quick")
        bridge.process({"EXTRA": ir.DefValue.int_(-2)})

        assert recorder.plain_calls() == [{"DEBUG": False, "ITERATIONS": 64, "EXTRA": -2}]

    def test_overrides_do_not_leak_between_variants(self, recorder):
        bridge = make_bridge(recorder)

        bridge.begin_variant("First")
        bridge.process({"ITERATIONS": ir.DefValue.uint(8), "EXTRA": ir.DefValue.bool_(True)})
        bridge.begin_variant("Second")
        bridge.process({})

        assert recorder.plain_calls()[1] == {"DEBUG": False, "ITERATIONS": 64}

    def test_process_requires_begin_variant(self, recorder):
        with pytest.raises(RuntimeError, match="begin_variant"):
            make_bridge(recorder).process({})

    def test_result_is_collaborator_output(self, recorder):
        bridge = make_bridge(recorder)
        bridge.begin_variant("Only")
        assert bridge.process({}).startswith("template// ")


class TestBridgeErrors:
    def test_failure_is_wrapped_with_variant(self, recorder):
        recorder.fail_on["DEBUG"] = True
        bridge = make_bridge(recorder)
        bridge.begin_variant("Loud")

        with pytest.raises(PreprocessingError) as exc_info:
            bridge.process({"DEBUG": ir.DefValue.bool_(True)})

        error = exc_info.value
        assert error.declaration == "Shader"
        assert error.variant == "Loud"
        assert error.combination_index is None
        assert isinstance(error.__cause__, RuntimeError)
        assert "Preprocessing failed for Shader::Loud: RuntimeError" in str(error)

    def test_failure_reports_combination_index(self, recorder):
        recorder.fail_on["LEVEL"] = 10
        bridge = make_bridge(recorder)
        bridge.begin_variant("Fast")

        bridge.process({"LEVEL": ir.DefValue.uint(0)}, combination_index=0)
        with pytest.raises(PreprocessingError, match=r"Shader::Fast \(combination #1\)") as exc_info:
            bridge.process({"LEVEL": ir.DefValue.uint(10)}, combination_index=1)
        assert exc_info.value.combination_index == 1


class TestJinjaPreprocessor:
    def test_satisfies_protocol(self):
        assert isinstance(JinjaPreprocessor(), Preprocessor)

    def test_line_statements_select_branches(self):
        template = "a\n#if DEBUG\ndebug\n#else\nrelease\n#endif\nb\n"
        preprocessor = JinjaPreprocessor()

        debug = preprocessor.preprocess(template, {"DEBUG": ir.DefValue.bool_(True)})
        release = preprocessor.preprocess(template, {"DEBUG": ir.DefValue.bool_(False)})

        assert "debug" in debug and "release" not in debug
        assert "release" in release and "debug" not in release
        assert release.endswith("b\n")

    def test_substitution_renders_wgsl_literals(self):
        rendered = JinjaPreprocessor().preprocess(
            "let n = {{ N }}u; let d = {{ DEBUG }};",
            {"N": ir.DefValue.uint(16), "DEBUG": ir.DefValue.bool_(True)},
        )
        assert rendered == "let n = 16u; let d = true;"

    def test_integer_comparisons(self):
        template = "#if LEVEL > 5\nhigh\n#endif\n"
        preprocessor = JinjaPreprocessor()
        assert "high" in preprocessor.preprocess(template, {"LEVEL": ir.DefValue.int_(10)})
        assert "high" not in preprocessor.preprocess(template, {"LEVEL": ir.DefValue.int_(0)})

    def test_undefined_name_fails(self):
        with pytest.raises(Exception, match="MISSING"):
            JinjaPreprocessor().preprocess("#if MISSING\nx\n#endif\n", {})

    def test_line_statements_can_be_disabled(self):
        template = "#define X 1\n"
        rendered = JinjaPreprocessor(line_statement_prefix=None).preprocess(template, {})
        assert rendered == template
