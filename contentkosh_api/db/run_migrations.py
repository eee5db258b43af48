"""
Programmatic Alembic migration runner.

Runs migrations without an alembic.ini by pointing the script location at this
package's migrations directory.

Usage examples:
    python -m contentkosh_api.db.run_migrations upgrade head
    python -m contentkosh_api.db.run_migrations downgrade -1
    python -m contentkosh_api.db.run_migrations stamp head
    python -m contentkosh_api.db.run_migrations history
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List

from alembic import command
from alembic.config import Config

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

# Commands taking an optional revision argument, with the revision used when omitted
_REVISION_COMMANDS: Dict[str, tuple[Callable[..., None], str]] = {
    "upgrade": (command.upgrade, "head"),
    "downgrade": (command.downgrade, "-1"),
    "stamp": (command.stamp, "head"),
}

_PLAIN_COMMANDS: Dict[str, Callable[..., None]] = {
    "history": command.history,
    "current": command.current,
    "heads": command.heads,
    "revision": command.revision,
}


# PUBLIC_INTERFACE
def build_config() -> Config:
    """Alembic Config bound to the packaged migrations and the configured database."""
    from contentkosh_api.db.config import get_settings

    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    # Offline URL; env.py builds its own async engine for online runs
    cfg.set_main_option("sqlalchemy.url", get_settings().sync_database_url)
    return cfg


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None) -> None:
    """Run an Alembic command with programmatic configuration."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    cmd, other = args[0], args[1:]
    cfg = build_config()

    if cmd in _REVISION_COMMANDS:
        func, default = _REVISION_COMMANDS[cmd]
        func(cfg, *(other or [default]))
    elif cmd in _PLAIN_COMMANDS:
        _PLAIN_COMMANDS[cmd](cfg, *other)
    elif cmd == "show":
        if not other:
            print("Usage: show <revision>")
            sys.exit(2)
        command.show(cfg, other[0])
    else:
        print(f"Unsupported Alembic command: {cmd}")
        sys.exit(2)


if __name__ == "__main__":
    main()
