"""Core infrastructure: configuration, extensions, logging, errors and signals."""
