# Overview: Flask CLI command groups for bootstrap, staff inspection, and maintenance.

# backend/portpass/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to "portpass:create_app".
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init-db
#   Create all tables (idempotent) and seed the default admin when SEED_DEFAULT_ADMIN is on.
#
# Staff accounts:
# - python -m flask staff list [--all]
#   List staff accounts (active only unless --all).
# - python -m flask staff create --username clerk --full-name "Jane Doe" --designation "Clerk" --department "Ops" [--admin]
#   Create a staff account (prompts for the password).
# - python -m flask staff deactivate clerk
#   Disable a staff account and revoke its sessions.
#
# Maintenance:
# - python -m flask sessions cleanup --retention-days 30
#   Delete expired/revoked sessions older than the retention window.

import click
from datetime import timedelta
from flask import current_app
from flask.cli import with_appcontext

from .errors import PortPassError
from . import seed_default_admin
from .extensions import db, get_store
from .services import auth_service, session_service


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create database tables, then seed the default admin if enabled."""
    db.create_all()
    click.echo("PASS Database tables created")
    seed_default_admin(current_app, get_store())


@click.group('staff')
def staff_group():
    """Staff account commands."""


@staff_group.command('list')
@click.option('--all', 'include_inactive', is_flag=True, help='Include disabled accounts')
@with_appcontext
def list_staff(include_inactive):
    """List staff accounts."""
    staff = get_store().list_staff(include_inactive=include_inactive)

    if not staff:
        click.echo("No staff found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'Username':<20} {'Full name':<25} {'Designation':<25} {'Admin':<6} {'Active'}")
    click.echo("="*100)

    for member in staff:
        admin_str = "Yes" if member.is_admin else "No"
        active_str = "Yes" if member.is_active else "No"
        click.echo(
            f"{member.username:<20} {member.full_name:<25} {member.designation:<25} {admin_str:<6} {active_str}"
        )

    click.echo("="*100 + "\n")


@staff_group.command('create')
@click.option('--username', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--full-name', prompt=True)
@click.option('--designation', prompt=True)
@click.option('--department', prompt=True)
@click.option('--admin', 'is_admin', is_flag=True, help='Grant administrator access')
@with_appcontext
def create_staff(username, password, full_name, designation, department, is_admin):
    """Create a staff account."""
    try:
        staff = auth_service.create_staff(
            get_store(),
            {
                "username": username,
                "password": password,
                "fullName": full_name,
                "designation": designation,
                "department": department,
                "isAdmin": is_admin,
            },
            rounds=current_app.config["BCRYPT_ROUNDS"],
        )
    except PortPassError as e:
        raise click.ClickException(e.message)
    click.echo(f"PASS Created staff: {staff.username} (admin={staff.is_admin})")


@staff_group.command('deactivate')
@click.argument('username')
@with_appcontext
def deactivate_staff(username):
    """Disable a staff account."""
    store = get_store()
    staff = store.get_staff_by_username(username)
    if staff is None:
        raise click.ClickException(f"Staff '{username}' not found")
    auth_service.deactivate_staff(store, staff.id)
    click.echo(f"PASS Deactivated staff: {username}")


@click.group('sessions')
def sessions_group():
    """Session maintenance commands."""


@sessions_group.command('cleanup')
@click.option('--retention-days', default=30, show_default=True, type=int)
@with_appcontext
def cleanup_sessions(retention_days):
    """Delete expired and revoked sessions older than the retention window."""
    deleted = session_service.cleanup_sessions(get_store(), timedelta(days=retention_days))
    click.echo(f"PASS Deleted {deleted} stale session(s)")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(staff_group)
    app.cli.add_command(sessions_group)
