"""Textual viewer for knbn board files."""
