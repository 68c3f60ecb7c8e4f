"""Current migration revision, attached to log records while a revision runs."""

from contextvars import ContextVar, Token

revision_var: ContextVar[str] = ContextVar("migration_revision", default="")


def get_revision() -> str:
    """Get the revision currently being applied, or "" outside a migration."""
    return revision_var.get()


def set_revision(revision: str) -> Token[str]:
    """Set the revision being applied."""
    return revision_var.set(revision)


def reset_revision(token: Token[str]) -> None:
    """Reset revision to previous value."""
    revision_var.reset(token)
