"""
Maintenance commands, registered on the app by create_app:

    flask --app api init-db
    flask --app api create-admin --email admin@example.com --password ...
    flask --app api purge-tokens

purge-tokens is the passive-expiry sweep for refresh tokens; schedule it
(cron, k8s CronJob) rather than calling it from request handlers.
"""
import click
from sqlalchemy.exc import IntegrityError

from api.context import get_context
from models.user import Role


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create missing tables."""
        get_context().storage.create_tables()
        click.echo("database ready")

    @app.cli.command("create-admin")
    @click.option("--email", required=True)
    @click.option("--password", required=True, prompt=True, hide_input=True)
    @click.option("--name", default="Administrator")
    def create_admin(email, password, name):
        """Create an admin user, or promote an existing one."""
        ctx = get_context()
        credential = ctx.identities.find_credential_by_email(email)
        if credential is not None:
            ctx.identities.set_role(credential.subject_id, Role.ADMIN)
            click.echo(f"promoted {credential.email} to admin")
            return
        try:
            user = ctx.identities.create_user(
                email=email, password_hash=ctx.verifier.hash(password), name=name, role=Role.ADMIN
            )
        except IntegrityError as exc:
            raise click.ClickException(f"could not create admin: {exc.orig}") from exc
        click.echo(f"created admin {user.email} ({user.id})")

    @app.cli.command("purge-tokens")
    def purge_tokens():
        """Delete refresh tokens past their expiry."""
        count = get_context().refresh_tokens.purge_expired()
        click.echo(f"purged {count} expired refresh tokens")
