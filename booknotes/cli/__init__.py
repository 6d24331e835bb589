"""Typer command-line interface for the book notes client."""
