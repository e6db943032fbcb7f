"""Tests for :mod:`accounts.controllers`."""
