"""Tests for :mod:`accounts.services.session_cache`."""
