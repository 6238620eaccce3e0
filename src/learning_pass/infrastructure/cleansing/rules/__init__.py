"""Registered field normalizers."""
