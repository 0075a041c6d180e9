"""
Comandos de administración:

- sales-commission create-admin: crear un usuario administrador
"""
import asyncio

import click
from pydantic import ValidationError as SchemaValidationError

from app.config.database import SessionLocal, init_db
from app.core.auth.service import AuthService
from app.core.exceptions import ConflictError
from app.modules.users.schemas import UserCreate


@click.group()
def cli():
    """Administración de Sales Commission API"""


@cli.command('create-admin')
@click.option('--name', prompt=True, help='Nombre del administrador')
@click.option('--email', prompt=True, help='Email del administrador')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Contraseña')
def create_admin(name, email, password):
    """Crear un administrador (el registro público solo crea agentes)."""
    try:
        user_data = UserCreate(name=name, email=email, password=password)
    except SchemaValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            click.echo(click.style(f'❌ {field}: {error["msg"]}', fg='red'))
        raise SystemExit(1)

    init_db()
    db = SessionLocal()
    try:
        admin = asyncio.run(AuthService(db).create_admin(user_data))
    except ConflictError as e:
        click.echo(click.style(f'❌ {e.message}: {user_data.email}', fg='red'))
        raise SystemExit(1)
    finally:
        db.close()

    click.echo(click.style('✅ Administrador creado', fg='green', bold=True))
    click.echo(f'   Email: {admin.email}')
    click.echo(f'   ID: {admin.id}')


if __name__ == '__main__':
    cli()
