"""Interface layer package: the Typer CLI."""
