"""Integrations with the database and the session cache."""
