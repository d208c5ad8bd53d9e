"""Adaptateur CLI (Typer + Rich)."""
