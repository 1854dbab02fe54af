"""Parsers for version strings and the npm dependency tree."""
