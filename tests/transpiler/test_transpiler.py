"""Tests for the transpiler facade."""

import pytest
from loguru import logger

from glslcross.transpiler import (
    ShaderTranspiler,
    transpile,
    validate_source,
)
from glslcross.transpiler.core.interfaces import ShaderStage, ShaderTarget
from glslcross.transpiler.errors import InputError, ToolchainError
from glslcross.transpiler.models import TranspilationResult

ALL_TARGETS = list(ShaderTarget)
ALL_STAGES = list(ShaderStage)


class TestValidation:
    """Test cases for the pre-conversion checks."""

    @pytest.mark.parametrize("target", ALL_TARGETS)
    @pytest.mark.parametrize("stage", ALL_STAGES)
    def test_empty_source(self, transpiler, fake_runner, target, stage):
        """Test that empty source fails without invoking any tool."""
        result = transpiler.transpile("", target, stage)

        assert result == TranspilationResult(
            success=False, message="Input shader source is empty"
        )
        assert fake_runner.invocations == []

    @pytest.mark.parametrize("target", ALL_TARGETS)
    @pytest.mark.parametrize(
        "source",
        [
            "void main()",
            "void main() {",
            "void main() }",
            "float x = 1.0;",
        ],
    )
    def test_missing_braces(self, transpiler, fake_runner, target, source):
        result = transpiler.transpile(source, target, ShaderStage.VERTEX)

        assert not result.success
        assert result.message == (
            "ERROR: Missing curly braces in shader source. Please fix the problem."
        )
        assert fake_runner.invocations == []

    def test_braces_are_not_balanced_checked(self):
        """Test that only the presence of each brace is checked."""
        validate_source("} void main() {")
        validate_source("{{{ }")

    def test_validate_source_raises(self):
        with pytest.raises(InputError):
            validate_source("")


class TestTranspile:
    """Test cases for ShaderTranspiler.transpile."""

    @pytest.mark.parametrize("stage", ALL_STAGES)
    def test_glsl_passthrough(self, transpiler, fake_runner, vertex_source, stage):
        """Test that the source format target is the identity."""
        result = transpiler.transpile(vertex_source, ShaderTarget.GLSL, stage)

        assert result.success
        assert result.output == vertex_source
        assert result.binary == ()
        assert fake_runner.invocations == []

    def test_internal_fault_becomes_failure(self, toolchain_config, vertex_source):
        """Test that unexpected exceptions never escape the facade."""

        class ExplodingRunner:
            def run(self, invocation):
                raise RuntimeError("boom")

        transpiler = ShaderTranspiler(toolchain_config, ExplodingRunner())

        result = transpiler.transpile(
            vertex_source, ShaderTarget.HLSL, ShaderStage.VERTEX
        )

        assert not result.success
        assert result.message == "Transpilation exception: boom"

    def test_unknown_target_becomes_failure(self, transpiler, fake_runner):
        """Test that a target outside the enum fails instead of raising."""
        result = transpiler.transpile("void main() {}", "hlsl", ShaderStage.VERTEX)

        assert result == TranspilationResult(
            success=False, message="Unknown shader target"
        )
        assert fake_runner.invocations == []

    def test_unknown_stage_becomes_failure(self, transpiler):
        result = transpiler.transpile("void main() {}", ShaderTarget.HLSL, 3)

        assert not result.success
        assert result.message == "Unknown shader stage"

    def test_toolchain_error_becomes_failure(self, toolchain_config, vertex_source):
        class TimingOutRunner:
            def run(self, invocation):
                raise ToolchainError("glslang timed out after 5.0s", "glslang")

        transpiler = ShaderTranspiler(toolchain_config, TimingOutRunner())

        result = transpiler.transpile(
            vertex_source, ShaderTarget.VULKAN, ShaderStage.VERTEX
        )

        assert not result.success
        assert result.message == "glslang timed out after 5.0s"

    def test_calls_use_separate_scratch_directories(
        self, transpiler, fake_runner, toolchain_config, vertex_source
    ):
        """Test that each call gets its own scratch directory and cleans it up."""
        transpiler.transpile(vertex_source, ShaderTarget.HLSL, ShaderStage.VERTEX)
        transpiler.transpile(vertex_source, ShaderTarget.HLSL, ShaderStage.VERTEX)

        first, second = (i.args[-1] for i in fake_runner.invocations)
        assert first != second
        assert list(toolchain_config.scratch_dir.iterdir()) == []

    def test_keep_intermediates(self, make_runner, make_transpiler, vertex_source):
        transpiler = make_transpiler(make_runner(), keep_intermediates=True)

        transpiler.transpile(vertex_source, ShaderTarget.HLSL, ShaderStage.VERTEX)

        (directory,) = transpiler.config.scratch_dir.iterdir()
        assert (directory / "validate.hlsl").is_file()

    def test_module_level_transpile(self, toolchain_config):
        result = transpile(
            "void main() {}",
            ShaderTarget.GLSL,
            ShaderStage.FRAGMENT,
            config=toolchain_config,
        )
        assert result.success
        assert result.output == "void main() {}"

    def test_metadata_helpers(self, transpiler, vertex_source):
        assert [u.name for u in transpiler.extract_uniforms(vertex_source)] == [
            "model",
            "view",
        ]
        assert [a.location for a in transpiler.extract_attributes(vertex_source)] == [
            0,
            2,
        ]

    @pytest.mark.parametrize(
        "target, expected",
        [
            (ShaderTarget.GLSL, "#version 330 core"),
            (ShaderTarget.HLSL, "// HLSL Shader (Target: Direct3D 11)"),
            (ShaderTarget.VULKAN, "#version 450 core"),
            (ShaderTarget.METAL, "// Metal Shader Language"),
        ],
    )
    def test_target_version_string(self, target, expected):
        assert ShaderTranspiler.get_target_version_string(target) == expected


class TestTranspileProgram:
    """Test cases for ShaderTranspiler.transpile_program."""

    def test_combines_both_stages(self, transpiler, vertex_source, fragment_source):
        """Test that both outputs are joined under banners, vertex first."""
        # Arrange
        vertex = transpiler.transpile(
            vertex_source, ShaderTarget.HLSL, ShaderStage.VERTEX
        )
        fragment = transpiler.transpile(
            fragment_source, ShaderTarget.HLSL, ShaderStage.FRAGMENT
        )

        # Act
        result = transpiler.transpile_program(
            vertex_source, fragment_source, ShaderTarget.HLSL
        )

        # Assert
        assert result.success
        assert result.output == (
            "// === VERTEX SHADER ===\n"
            + vertex.output
            + "\n\n// === FRAGMENT SHADER ===\n"
            + fragment.output
        )
        assert result.binary == ()

    def test_combined_vulkan_program_has_no_binary(
        self, transpiler, vertex_source, fragment_source
    ):
        result = transpiler.transpile_program(
            vertex_source, fragment_source, ShaderTarget.VULKAN
        )

        assert result.success
        assert result.output.index("// === VERTEX SHADER ===") < result.output.index(
            "// === FRAGMENT SHADER ==="
        )
        assert result.binary == ()

    def test_fragment_failure_is_returned(
        self, make_runner, make_transpiler, vertex_source, fragment_source
    ):
        """Test that a failing fragment stage hides the vertex success."""
        runner = make_runner(fails=lambda invocation: "ps_6_0" in invocation.args)
        transpiler = make_transpiler(runner)

        result = transpiler.transpile_program(
            vertex_source, fragment_source, ShaderTarget.HLSL
        )

        assert result == transpiler.transpile(
            fragment_source, ShaderTarget.HLSL, ShaderStage.FRAGMENT
        )
        assert not result.success
        assert "VERTEX SHADER" not in result.output

    def test_vertex_failure_short_circuits(
        self, transpiler, fake_runner, fragment_source
    ):
        result = transpiler.transpile_program("", fragment_source, ShaderTarget.HLSL)

        assert not result.success
        assert result.message == "Input shader source is empty"
        assert fake_runner.invocations == []


class TestLogging:
    """Test cases for the log record emitted per transpile call."""

    @pytest.fixture
    def records(self):
        messages = []
        sink_id = logger.add(messages.append, level="INFO")
        yield messages
        logger.remove(sink_id)

    def test_success_logs_one_info_record(self, transpiler, vertex_source, records):
        transpiler.transpile(vertex_source, ShaderTarget.HLSL, ShaderStage.VERTEX)

        (message,) = records
        assert message.record["level"].name == "INFO"
        assert "successful" in message.record["message"]
        assert "HLSL" in message.record["message"]
        assert "VERTEX" in message.record["message"]

    def test_input_error_logs_one_error_record(self, transpiler, records):
        transpiler.transpile("", ShaderTarget.METAL, ShaderStage.FRAGMENT)

        (message,) = records
        assert message.record["level"].name == "ERROR"
        assert "METAL" in message.record["message"]
        assert "Input shader source is empty" in message.record["message"]

    def test_internal_fault_logs_one_error_record(
        self, toolchain_config, vertex_source, records
    ):
        class ExplodingRunner:
            def run(self, invocation):
                raise RuntimeError("boom")

        transpiler = ShaderTranspiler(toolchain_config, ExplodingRunner())

        transpiler.transpile(vertex_source, ShaderTarget.VULKAN, ShaderStage.VERTEX)

        (message,) = records
        assert message.record["level"].name == "ERROR"
        assert "VULKAN" in message.record["message"]
        assert "Transpilation exception: boom" in message.record["message"]

    def test_unknown_target_is_named_in_record(self, transpiler, records):
        transpiler.transpile("void main() {}", "wgsl", ShaderStage.VERTEX)

        (message,) = records
        assert message.record["level"].name == "ERROR"
        assert "'wgsl'" in message.record["message"]
