"""Ephemeris data files (optional overrides of built-in tables).

The readers here only parse local text files; nothing is downloaded.
"""
