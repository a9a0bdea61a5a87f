"""Parsers for change set input files."""

from .changes import ChangeSetParser

__all__ = ["ChangeSetParser"]
