"""Operator command-line interface (Typer + Rich)."""
