"""Tests for the transpiler data models and errors."""

import dataclasses

import pytest

from glslcross.transpiler.errors import InputError, ToolchainError, TranspilerError
from glslcross.transpiler.models import TranspilationResult, UniformBinding


def test_results_are_immutable():
    result = TranspilationResult.ok("float4 main() {}")

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.output = ""  # type: ignore[misc]


def test_result_constructors():
    ok = TranspilationResult.ok("#version 450 core", (1, 2), "done")
    failed = TranspilationResult.failure("DXC failed", output="partial")

    assert ok == TranspilationResult(True, "#version 450 core", (1, 2), "done")
    assert failed == TranspilationResult(False, "partial", (), "DXC failed")


@pytest.mark.parametrize(
    "result, usable",
    [
        (TranspilationResult.ok("code"), True),
        (TranspilationResult.ok("", (1,)), True),
        (TranspilationResult.ok(""), False),
        (TranspilationResult.failure("bad", output="partial"), False),
    ],
)
def test_usable(result, usable):
    assert result.usable is usable


def test_uniform_binding_defaults_to_set_zero():
    assert UniformBinding("model", "mat4", 0).set == 0


def test_error_hierarchy():
    error = ToolchainError("dxc timed out after 5.0s", "dxc")

    assert isinstance(error, TranspilerError)
    assert issubclass(InputError, TranspilerError)
    assert error.message == "dxc timed out after 5.0s"
    assert error.tool == "dxc"
    assert str(error) == "dxc timed out after 5.0s"
