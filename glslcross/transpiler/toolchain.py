"""
External toolchain invocation for the shader transpiler.

Converters describe the tool they need as a `ToolInvocation` and hand it to a
`ToolRunner`. The default runner spawns the process and blocks until it
exits; tests substitute their own runner. Every call works inside its own
`ScratchSpace`, so concurrent calls never share intermediate files.
"""

import shutil
import subprocess
import uuid
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

import numpy as np
from loguru import logger

from glslcross.transpiler.config import ToolchainConfig
from glslcross.transpiler.errors import ToolchainError


@dataclass(frozen=True)
class ToolInvocation:
    """An external tool and its arguments.

    Attributes:
        tool: Tool name without directory or executable suffix
        args: Command line arguments
    """

    tool: str
    args: tuple[str, ...]

    def command(self, config: ToolchainConfig) -> list[str]:
        """Build the full command line for the configured SDK."""
        return [str(config.tool_path(self.tool)), *self.args]


@dataclass(frozen=True)
class ToolResult:
    """Exit status and captured output of a finished tool."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class SubprocessRunner:
    """Runs tools as child processes, enforcing the configured timeout."""

    def __init__(self, config: ToolchainConfig):
        self.config = config

    def run(self, invocation: ToolInvocation) -> ToolResult:
        """Run a tool and wait for it to exit.

        Args:
            invocation: Tool name and arguments

        Returns:
            Exit status and captured output

        Raises:
            ToolchainError: If the tool cannot be started or exceeds the timeout
        """
        command = invocation.command(self.config)
        logger.debug(f"Running {' '.join(command)}")

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.config.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ToolchainError(
                f"{invocation.tool} timed out after {self.config.timeout}s",
                invocation.tool,
            ) from e
        except OSError as e:
            raise ToolchainError(
                f"Failed to start {invocation.tool}: {e}", invocation.tool
            ) from e

        if completed.stdout:
            logger.debug(f"{invocation.tool} stdout:\n{completed.stdout}")
        if completed.stderr:
            logger.debug(f"{invocation.tool} stderr:\n{completed.stderr}")
        logger.debug(f"{invocation.tool} exited with {completed.returncode}")

        return ToolResult(completed.returncode, completed.stdout, completed.stderr)


class ScratchSpace:
    """A scratch directory owned by a single transpilation call.

    The directory is named after a fresh call identifier under the configured
    scratch root and is removed on exit unless intermediates are kept.

    Examples:
        >>> with ScratchSpace(config) as scratch:
        ...     path = scratch.write_text("validate.hlsl", hlsl)
    """

    def __init__(self, config: ToolchainConfig, call_id: str | None = None):
        self.config = config
        self.call_id = call_id or uuid.uuid4().hex
        self.directory = Path(config.scratch_dir) / self.call_id

    def __enter__(self) -> "ScratchSpace":
        self.directory.mkdir(parents=True, exist_ok=True)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.config.keep_intermediates:
            logger.debug(f"Keeping scratch directory {self.directory}")
            return
        shutil.rmtree(self.directory, ignore_errors=True)

    def path(self, name: str) -> Path:
        return self.directory / name

    def write_text(self, name: str, text: str) -> Path:
        path = self.path(name)
        path.write_text(text, encoding="utf-8")
        return path

    def read_text(self, name: str) -> str:
        return self.path(name).read_text(encoding="utf-8")

    def read_words(self, name: str) -> tuple[int, ...]:
        """Read a binary file as little-endian 32-bit words.

        Trailing bytes that do not fill a whole word are ignored.
        """
        data = self.path(name).read_bytes()
        usable = len(data) - len(data) % 4
        words = np.frombuffer(data[:usable], dtype="<u4")
        return tuple(words.tolist())
