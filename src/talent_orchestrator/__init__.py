"""Budgeted multi-agent pipeline for resume parsing, job matching and application packs."""

__version__ = "0.1.0"
