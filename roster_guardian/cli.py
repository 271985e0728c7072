"""
Roster Guardian - operator CLI

Commands:
1. migrate   - apply Alembic migrations up to head
2. check     - verify the database is at the expected schema revision
3. seed      - insert default statuses and optionally an admin account
4. statuses  - show the active status catalog
"""
import argparse
import asyncio
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from rich.console import Console
from rich.table import Table

from roster_guardian.config import settings
from roster_guardian.database import SCHEMA_REVISION, Database
from roster_guardian.errors import RosterGuardianError, SchemaVersionError
from roster_guardian.logging_config import configure_logging
from roster_guardian.services import StatusCatalog, UserDirectory

console = Console()

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def alembic_config() -> AlembicConfig:
    """Alembic config pointing at the bundled migrations and the configured database."""
    config = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    return config


def cmd_migrate(args):
    """Upgrade the database schema."""
    console.print(f"\n[bold blue]Migrating database to {args.revision}[/bold blue]\n")
    command.upgrade(alembic_config(), args.revision)
    console.print("[green]Migrations applied[/green]")
    return True


async def _check() -> bool:
    database = Database(settings.DATABASE_URL)
    try:
        await database.verify_schema()
    except SchemaVersionError as e:
        console.print(f"[red]FAILED[/red] - {e}")
        return False
    finally:
        await database.close()
    console.print(f"[green]OK[/green] - schema at revision {SCHEMA_REVISION}")
    return True


def cmd_check(args):
    """Verify the schema revision."""
    console.print("Schema: ", end="")
    return asyncio.run(_check())


async def _seed(args) -> bool:
    database = Database(settings.DATABASE_URL)
    try:
        async with database.session() as db:
            inserted = await StatusCatalog(db).seed_defaults()
            console.print(f"Statuses: {inserted} inserted")

            if args.admin_email:
                if not (args.admin_name and args.admin_password_hash):
                    console.print("[red]--admin-name and --admin-password-hash are required with --admin-email[/red]")
                    return False
                user, created = await UserDirectory(db).ensure_admin(
                    email=args.admin_email,
                    password_hash=args.admin_password_hash,
                    name=args.admin_name,
                )
                state = "created" if created else "already present"
                console.print(f"Admin: {user.email} (id={user.id}) {state}")
    except RosterGuardianError as e:
        console.print(f"[red]Seeding failed ({e.kind}): {e.message}[/red]")
        return False
    finally:
        await database.close()

    console.print("\n[green]Seeding complete[/green]")
    return True


def cmd_seed(args):
    """Seed default statuses and an optional admin account."""
    return asyncio.run(_seed(args))


async def _statuses(args) -> bool:
    database = Database(settings.DATABASE_URL)
    try:
        async with database.session() as db:
            catalog = StatusCatalog(db)
            statuses = await (catalog.list_all() if args.all else catalog.list_active())
    finally:
        await database.close()

    if not statuses:
        console.print("[yellow]No statuses found. Run 'seed' first.[/yellow]")
        return True

    table = Table(title="Issue Statuses")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Color")
    table.add_column("Order", justify="right")
    table.add_column("Active")
    for status in statuses:
        table.add_row(
            str(status.id),
            status.name,
            f"[{status.color}]{status.color}[/]",
            str(status.sort_order),
            "yes" if status.is_active else "[dim]no[/dim]",
        )
    console.print(table)
    return True


def cmd_statuses(args):
    """Show the status catalog."""
    return asyncio.run(_statuses(args))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roster_guardian",
        description="Roster Guardian - support roster and issue tracker"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply database migrations")
    migrate_parser.add_argument("--revision", default="head", help="Target revision (default: head)")

    # check
    subparsers.add_parser("check", help="Verify the database schema revision")

    # seed
    seed_parser = subparsers.add_parser("seed", help="Insert default statuses and an admin user")
    seed_parser.add_argument("--admin-email", help="Email of the admin account to ensure")
    seed_parser.add_argument("--admin-name", help="Display name of the admin account")
    seed_parser.add_argument("--admin-password-hash", help="Pre-hashed password for the admin account")

    # statuses
    statuses_parser = subparsers.add_parser("statuses", help="Show the issue status catalog")
    statuses_parser.add_argument("--all", action="store_true", help="Include inactive statuses")

    return parser


def main(argv=None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "migrate": cmd_migrate,
        "check": cmd_check,
        "seed": cmd_seed,
        "statuses": cmd_statuses,
    }

    return 0 if commands[args.command](args) else 1


if __name__ == "__main__":
    sys.exit(main())
