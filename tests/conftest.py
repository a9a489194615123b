"""Fixtures and configuration for pytest."""

import struct
import textwrap
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

import pytest

from glslcross.transpiler import ShaderTranspiler
from glslcross.transpiler.config import ToolchainConfig
from glslcross.transpiler.toolchain import ToolInvocation, ToolResult

# Magic number, version 1.0, generator 0, bound 7
SPIRV_WORDS = (0x07230203, 0x00010000, 0x00000000, 0x00000007)
SPIRV_BYTES = struct.pack("<4I", *SPIRV_WORDS)

METAL_SOURCE = "#include <metal_stdlib>\nusing namespace metal;\n"


class FakeRunner:
    """Tool runner that records invocations instead of spawning processes.

    Files named in the arguments are captured while the tool "runs", since the
    scratch directory is gone once the call returns. On success the artifact
    configured for the tool is written to the path following `-o`.
    """

    def __init__(
        self,
        fails: Callable[[ToolInvocation], bool] | None = None,
        artifacts: dict[str, bytes | str] | None = None,
    ):
        self.fails = fails or (lambda invocation: False)
        self.artifacts = artifacts if artifacts is not None else {
            "glslang": SPIRV_BYTES,
            "spirv-cross": METAL_SOURCE,
        }
        self.invocations: list[ToolInvocation] = []
        self.inputs: dict[str, bytes] = {}

    def run(self, invocation: ToolInvocation) -> ToolResult:
        self.invocations.append(invocation)
        for arg in invocation.args:
            path = Path(arg)
            if path.is_file():
                self.inputs[path.name] = path.read_bytes()

        if self.fails(invocation):
            return ToolResult(1, stderr=f"{invocation.tool}: error")

        if "-o" in invocation.args:
            output = Path(invocation.args[invocation.args.index("-o") + 1])
            artifact = self.artifacts.get(invocation.tool, b"")
            if isinstance(artifact, str):
                output.write_text(artifact, encoding="utf-8")
            else:
                output.write_bytes(artifact)
        return ToolResult(0)


@pytest.fixture
def toolchain_config(tmp_path: Path) -> ToolchainConfig:
    """Fixture providing a config with a fake SDK and a temporary scratch root."""
    return ToolchainConfig(
        sdk_root=Path("/opt/sdk"),
        scratch_dir=tmp_path / "ShaderCache",
        timeout=5.0,
        executable_suffix=".exe",
    )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def transpiler(
    toolchain_config: ToolchainConfig, fake_runner: FakeRunner
) -> ShaderTranspiler:
    return ShaderTranspiler(toolchain_config, fake_runner)


@pytest.fixture
def vertex_source() -> str:
    """Fixture providing a vertex shader with uniforms, attributes and a varying."""
    return textwrap.dedent(
        """\
        #version 330 core
        layout(location = 0) in vec3 aPos;
        layout(location = 2) in vec3 normal;
        uniform mat4 model;
        uniform mat4 view;
        out vec3 vNormal;
        void main() {
            vNormal = normal;
            gl_Position = view * model * vec4(aPos, 1.0);
        }
        """
    )


@pytest.fixture
def fragment_source() -> str:
    """Fixture providing a fragment shader with a uniform and a varying."""
    return textwrap.dedent(
        """\
        #version 330 core
        in vec3 vNormal;
        uniform vec3 lightDir;
        void main() {
            float d = max(dot(normalize(vNormal), lightDir), 0.0);
            gl_FragColor = vec4(d * 0.5, d, d, 1.0);
        }
        """
    )


@pytest.fixture
def make_runner() -> Callable[..., FakeRunner]:
    """Fixture providing the fake runner class for custom failure setups."""
    return FakeRunner


@pytest.fixture
def make_transpiler(
    toolchain_config: ToolchainConfig,
) -> Callable[..., ShaderTranspiler]:
    """Fixture building transpilers around a runner with config overrides."""

    def _make(runner: FakeRunner, **overrides: object) -> ShaderTranspiler:
        config = replace(toolchain_config, **overrides)  # type: ignore[arg-type]
        return ShaderTranspiler(config, runner)

    return _make
