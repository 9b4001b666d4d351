"""
ProjectHub.

- backend/: Data access, export pipeline, configuration, logging
- cli/: Operator command-line client (Typer + Rich)
"""
