"""
Exceptions and error handling for the shader transpiler.

These exceptions are raised inside the transpiler and converted into failed
`TranspilationResult` values at the facade, so they never reach callers of
`transpile` or `transpile_program`.
"""


class TranspilerError(Exception):
    """Base exception for errors during shader transpilation.

    Examples:
        >>> raise TranspilerError("Unknown shader target")
        TranspilerError: Unknown shader target
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InputError(TranspilerError):
    """Raised when shader source fails the pre-conversion checks."""


class ToolchainError(TranspilerError):
    """Raised when an external tool cannot be started or does not finish.

    A tool that runs and exits with a non-zero status is not an error at this
    level; converters turn that into a failed result themselves.
    """

    def __init__(self, message: str, tool: str):
        self.tool = tool
        super().__init__(message)
