"""Utilities package for the bakery cost tracker (config, constants, validation, CLI)."""
