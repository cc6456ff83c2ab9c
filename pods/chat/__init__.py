"""Chat assistant pod: validated, rate-limited proxy to a hosted model."""
