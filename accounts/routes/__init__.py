"""Flask blueprints for the accounts service."""
