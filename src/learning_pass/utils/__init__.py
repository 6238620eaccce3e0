"""Shared utilities: structured logging, date helpers and error collection."""
