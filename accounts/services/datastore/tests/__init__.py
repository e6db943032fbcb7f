"""Tests for :mod:`accounts.services.datastore`."""
