"""CLI tools for KidCare administration."""

import click

from app.core.security import create_session_token
from app.db.enums import Role
from app.db.models import User
from app.db.session import SessionLocal
from app.services import vaccination_service


@click.group()
def cli():
    """KidCare CLI tools."""
    pass


@cli.command()
def seed_catalog():
    """
    Insert any missing vaccine catalog entries.

    Safe to run repeatedly; existing entries are left untouched.

    Example:
        python -m app.cli seed-catalog
    """
    db = SessionLocal()
    try:
        added = vaccination_service.seed_catalog(db)
        db.commit()
        click.echo(f"✓ Catalog seeded: {added} entries added")
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}")
        raise SystemExit(1)
    finally:
        db.close()


@cli.command()
@click.option("--email", required=True, help="User email address")
@click.option("--name", "display_name", default=None, help="Display name (new users only)")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role]),
    default=Role.PARENT.value,
    help="Role for a newly created user",
)
def issue_token(email: str, display_name: str | None, role: str):
    """
    Print a session token for a user, creating the user if needed.

    For local development; production identity comes from the auth provider.

    Example:
        python -m app.cli issue-token --email parent@example.com --role parent
    """
    db = SessionLocal()
    try:
        email = email.lower().strip()
        user = db.query(User).filter(User.email == email).first()
        if not user:
            user = User(
                email=email,
                display_name=display_name or email.split("@")[0],
                role=role,
            )
            db.add(user)
            db.commit()
            click.echo(f"✓ Created {role} user {email}", err=True)

        click.echo(create_session_token(user.id, user.role, user.token_version))
    except Exception as e:
        db.rollback()
        click.echo(f"❌ Error: {e}", err=True)
        raise SystemExit(1)
    finally:
        db.close()


if __name__ == "__main__":
    cli()
