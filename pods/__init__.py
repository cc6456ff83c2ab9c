"""Deployable services for the chord explorer."""
