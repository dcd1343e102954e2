"""CLI layer: typer entrypoint, shells and Rich console hosts."""
