"""Core abstractions shared by the transpiler and its backends."""
