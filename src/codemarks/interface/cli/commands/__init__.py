"""
CLI command functions, one module per command.

Each function is registered on the Typer app by the orchestrator.
"""
