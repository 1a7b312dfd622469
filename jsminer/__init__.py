"""Scan JavaScript, files, directories and web pages for secrets, tokens and HTTP endpoints."""

__version__ = "0.1.0"