"""
Command-line helpers for dev/test.

Be sure that you are using the same secret here as when you run the app. Set
``JWT_SECRET=somesecret`` in your environment to ensure that the same secret
is always used.

.. code-block:: bash

   $ JWT_SECRET=foosecret accounts create-db
   $ JWT_SECRET=foosecret accounts create-user --username alice \
       --email alice@foo.com --password Passw0rd
   Created account 1
   $ JWT_SECRET=foosecret accounts generate-token --account-id 1 \
       --username alice
   eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...
   $ accounts set-status --account-id 1 --status disabled
   Account 1 is disabled

.. warning: DO NOT USE create-user ON A PRODUCTION DATABASE.

"""

import click

from . import identity
from .domain import Status
from .exceptions import IdentityError
from .factory import create_web_app
from .services import datastore
from .tokens import TokenIssuer


@click.group()
def cli() -> None:
    """Manage the accounts service."""


@cli.command('create-db')
def create_db() -> None:
    """Create the account tables."""
    app = create_web_app()
    with app.app_context():
        datastore.create_all()
    click.echo('Created tables')


@cli.command('create-user')
@click.option('--username', prompt='Username')
@click.option('--email', prompt='Email address')
@click.option('--password', prompt='Password', hide_input=True)
@click.option('--nickname', prompt='Nickname', default='')
@click.option('--gender', prompt='Gender (0 unknown, 1 male, 2 female)',
              default=0, type=int)
def create_user(username: str, email: str, password: str,
                nickname: str = '', gender: int = 0) -> None:
    """Register a new account. For dev/test purposes only."""
    app = create_web_app()
    with app.app_context():
        datastore.create_all()
        try:
            account_id = identity.current_service().register(
                email, username, password, nickname, gender
            )
        except IdentityError as e:
            raise click.ClickException(str(e)) from e
    click.echo(f'Created account {account_id}')


@cli.command('set-status')
@click.option('--account-id', prompt='Numeric account ID', type=int)
@click.option('--status', prompt='Status',
              type=click.Choice(['active', 'disabled']))
def set_status(account_id: int, status: str) -> None:
    """Enable or disable an account."""
    app = create_web_app()
    with app.app_context():
        try:
            identity.current_service().update_account_status(
                account_id, Status[status.upper()]
            )
        except IdentityError as e:
            raise click.ClickException(str(e)) from e
    click.echo(f'Account {account_id} is {status}')


@cli.command('generate-token')
@click.option('--account-id', prompt='Numeric account ID', type=int)
@click.option('--username', prompt='Username')
@click.option('--ttl', default=None, type=int,
              help='Lifetime in seconds; defaults to SESSION_DURATION.')
def generate_token(account_id: int, username: str, ttl: int = None) -> None:
    """Generate a session token without checking credentials."""
    app = create_web_app()
    if ttl is None:
        ttl = int(app.config['SESSION_DURATION'])
    issuer = TokenIssuer(app.config['JWT_SECRET'])
    click.echo(issuer.issue(account_id, username, ttl))


if __name__ == '__main__':
    cli()
