"""
Identity and session service.

Registers accounts, checks credentials, and issues, verifies and revokes
signed session tokens. Account records live in a relational database (see
:mod:`accounts.services.datastore`); session bookkeeping, revocation and a
profile cache live in Redis (see :mod:`accounts.services.session_cache`).
:mod:`accounts.identity` ties them together, and
:mod:`accounts.controllers.accounts` exposes that logic as a JSON API.
"""
