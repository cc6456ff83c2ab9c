"""Chord explorer pod: HTTP API, command line and string synthesis."""
