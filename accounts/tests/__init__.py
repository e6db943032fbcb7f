"""Tests for :mod:`accounts`."""
