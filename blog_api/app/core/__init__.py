"""Core infrastructure: settings, logging, errors and the post store."""
