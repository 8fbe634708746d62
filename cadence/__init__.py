"""Cadence: cycle-aware wellness calendar service."""
