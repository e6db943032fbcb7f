"""Controllers for the accounts service."""
