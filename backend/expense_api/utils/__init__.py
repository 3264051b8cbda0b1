"""Shared helpers: error kinds, ownership checks, request validators."""
