"""Shared service plumbing: settings, structured logging and audio I/O."""

__version__ = "0.1.0"
