import click
from flask import current_app
from flask.cli import with_appcontext

from estateledger_backend.extensions import db
from estateledger_backend.models import User, ROLE_ADMIN
from estateledger_backend.services.bill_ledger import mark_overdue_rent_bills


@click.command("create-admin")
@click.option("--email", required=True)
@click.option("--password", required=True, prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--full-name", default="Administrator", show_default=True)
@with_appcontext
def create_admin_command(email, password, full_name):
    """Create an ADMIN account, or promote and reset the password of an existing one."""
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()
    if not user:
        user = User(email=email, full_name=full_name)
        db.session.add(user)
    user.role = ROLE_ADMIN
    user.set_password(password)
    db.session.commit()
    click.echo(f"Admin ensured: {email}")


@click.command("mark-overdue")
@click.option("--older-than-days", type=int, default=None, help="Defaults to RENT_OVERDUE_AFTER_DAYS.")
@with_appcontext
def mark_overdue_command(older_than_days):
    """Flip DUE rent bills older than the cutoff to OVERDUE."""
    if older_than_days is None:
        older_than_days = current_app.config["RENT_OVERDUE_AFTER_DAYS"]
    count = mark_overdue_rent_bills(db.session, older_than_days)
    click.echo(f"Marked {count} rent bill(s) overdue")


def register_cli(app):
    app.cli.add_command(create_admin_command)
    app.cli.add_command(mark_overdue_command)
