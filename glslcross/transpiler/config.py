"""
Toolchain configuration for the shader transpiler.

The SDK root, scratch directory and tool timeout are resolved once, usually
from the environment, and passed to the runner and converters explicitly.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

SDK_ROOT_ENV = "VULKAN_SDK"
SCRATCH_DIR_ENV = "GLSLCROSS_SCRATCH_DIR"
TOOL_TIMEOUT_ENV = "GLSLCROSS_TOOL_TIMEOUT"

DEFAULT_SDK_ROOT = "C:/VulkanSDK/default"
DEFAULT_SCRATCH_DIR = "Saved/ShaderCache"
DEFAULT_TOOL_TIMEOUT = 60.0


def _default_executable_suffix() -> str:
    return ".exe" if os.name == "nt" else ""


@dataclass(frozen=True)
class ToolchainConfig:
    """Configuration for external shader tools.

    Attributes:
        sdk_root: Root of the shader SDK; tools live in its `Bin` directory
        scratch_dir: Directory under which per-call scratch directories are made
        timeout: Seconds a tool may run before it is killed, None to wait forever
        executable_suffix: Suffix appended to tool names, `.exe` on Windows
        keep_intermediates: Keep scratch directories after each call
        scoped_matrix_multiply: Only rewrite products of declared matrices
    """

    sdk_root: Path = field(default_factory=lambda: Path(DEFAULT_SDK_ROOT))
    scratch_dir: Path = field(default_factory=lambda: Path(DEFAULT_SCRATCH_DIR))
    timeout: float | None = DEFAULT_TOOL_TIMEOUT
    executable_suffix: str = field(default_factory=_default_executable_suffix)
    keep_intermediates: bool = False
    scoped_matrix_multiply: bool = False

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: object
    ) -> "ToolchainConfig":
        """Build a configuration from environment variables.

        Args:
            environ: Environment to read, defaults to `os.environ`
            **overrides: Field values that take precedence over the environment

        Returns:
            Toolchain configuration
        """
        env = os.environ if environ is None else environ

        sdk_root = env.get(SDK_ROOT_ENV) or DEFAULT_SDK_ROOT
        scratch_dir = env.get(SCRATCH_DIR_ENV) or DEFAULT_SCRATCH_DIR

        timeout: float | None = DEFAULT_TOOL_TIMEOUT
        raw_timeout = env.get(TOOL_TIMEOUT_ENV)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning(
                    f"Ignoring invalid {TOOL_TIMEOUT_ENV}={raw_timeout!r}, "
                    f"using {DEFAULT_TOOL_TIMEOUT}s"
                )
            else:
                # Zero or negative disables the timeout
                if timeout <= 0:
                    timeout = None

        values: dict[str, object] = {
            "sdk_root": Path(sdk_root),
            "scratch_dir": Path(scratch_dir),
            "timeout": timeout,
        }
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]

    def tool_path(self, tool: str) -> Path:
        """Get the executable path of a tool inside the SDK."""
        return self.sdk_root / "Bin" / f"{tool}{self.executable_suffix}"
