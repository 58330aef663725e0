import argparse
import logging
import sys

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.app_shell.config import Settings
from src.app_shell.context import ServiceContext
from src.components.bootstrap import bootstrap_admin
from src.domain.errors import ModerationError
from src.rules.loader import load_rules

logger = logging.getLogger("cli")


def get_context(settings: Settings) -> ServiceContext:
    if not settings.rules_path.exists():
        logger.error(f"Rules file {settings.rules_path} not found.")
        sys.exit(1)

    rules = load_rules(settings.rules_path)
    return ServiceContext.create(settings.db_path, rules)


def handle_migrate(settings: Settings, args: argparse.Namespace) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(settings.db_path).run_migrations()
    print(f"Applied {len(applied)} migration(s).")


def handle_bootstrap(ctx: ServiceContext, args: argparse.Namespace) -> None:
    profile = bootstrap_admin(ctx.identity, ctx.rules, email=args.email, password=args.password)
    if profile is None:
        print("No admin created (an admin already exists or no credentials given).")
    else:
        print(f"Admin account ready: {profile.email} ({profile.id})")


def handle_review_queue(ctx: ServiceContext, args: argparse.Namespace) -> None:
    credential = ctx.credential_store.get_by_email(args.as_email)
    if not credential:
        logger.error(f"User {args.as_email} not found.")
        sys.exit(1)

    posts = ctx.moderation.list_unreviewed(credential.user_id)
    authors = ctx.moderation.resolve_authors(posts)
    if not posts:
        print("No posts waiting for review")
        return
    for post in posts:
        stamp = f"{post.created_at:%Y-%m-%d %H:%M}"
        print(f"{post.id}  {stamp}  {authors[post.author_id]}  {post.title}")


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Journal moderation CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending database migrations")

    bootstrap_parser = subparsers.add_parser("bootstrap", help="Create the first admin account")
    bootstrap_parser.add_argument("--email", help="Defaults to $JOURNAL_BOOTSTRAP_EMAIL")
    bootstrap_parser.add_argument("--password", help="Defaults to $JOURNAL_BOOTSTRAP_PASSWORD")

    queue_parser = subparsers.add_parser("review-queue", help="List posts waiting for review")
    queue_parser.add_argument("--as", dest="as_email", required=True, help="Admin email")

    args = parser.parse_args(argv)
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings, args)
        return

    ctx = get_context(settings)
    try:
        if args.command == "bootstrap":
            handle_bootstrap(ctx, args)
        elif args.command == "review-queue":
            handle_review_queue(ctx, args)
    except ModerationError as e:
        logger.error(f"{e.code}: {e.message}")
        sys.exit(2)


if __name__ == "__main__":
    main()
