"""Shared infrastructure: config, errors, events, storage, logging, CLI."""
