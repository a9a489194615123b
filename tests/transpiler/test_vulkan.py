"""Tests for the Vulkan / SPIR-V converter."""

from pathlib import Path

from glslcross.transpiler.core.interfaces import ShaderStage, ShaderTarget

SPIRV_WORDS = (0x07230203, 0x00010000, 0x00000000, 0x00000007)


def test_assembles_binary(transpiler, fake_runner, fragment_source):
    """Test that a successful assembly returns the SPIR-V words."""
    # Act
    result = transpiler.transpile(
        fragment_source, ShaderTarget.VULKAN, ShaderStage.FRAGMENT
    )

    # Assert
    assert result.success
    assert result.usable
    assert result.binary == SPIRV_WORDS
    assert result.message == "SPIR-V compilation success!"
    assert result.output.startswith("#version 450 core\n\n")
    assert "#version 330" not in result.output
    assert "in vec3 vNormal;" in result.output


def test_glslang_command(transpiler, fake_runner, toolchain_config, vertex_source):
    """Test the exact assembler command line and scratch file layout."""
    result = transpiler.transpile(
        vertex_source, ShaderTarget.VULKAN, ShaderStage.VERTEX
    )

    (invocation,) = fake_runner.invocations
    command = invocation.command(toolchain_config)
    input_path, output_path = Path(command[2]), Path(command[4])
    assert command[0] == str(Path("/opt/sdk") / "Bin" / "glslang.exe")
    assert command[1] == "-V"
    assert command[3] == "-o"
    assert input_path.name == "temp_input.glsl"
    assert output_path.name == "temp_input.spv"
    assert input_path.parent == output_path.parent
    assert fake_runner.inputs["temp_input.glsl"].decode() == result.output


def test_word_count_matches_file_size(make_runner, make_transpiler, vertex_source):
    """Test that the payload holds file size // 4 words."""
    payload = bytes(range(22))
    transpiler = make_transpiler(make_runner(artifacts={"glslang": payload}))

    result = transpiler.transpile(
        vertex_source, ShaderTarget.VULKAN, ShaderStage.VERTEX
    )

    assert len(result.binary) == len(payload) // 4
    assert result.binary[0] == int.from_bytes(payload[:4], "little")


def test_assembly_failure(make_runner, make_transpiler, vertex_source):
    """Test that a failed assembly is reported as a failure."""
    transpiler = make_transpiler(make_runner(fails=lambda invocation: True))

    result = transpiler.transpile(
        vertex_source, ShaderTarget.VULKAN, ShaderStage.VERTEX
    )

    assert not result.success
    assert result.output == ""
    assert result.binary == ()
    assert result.message == "SPIR-V compilation failed!"
