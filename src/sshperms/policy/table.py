"""Compiled-in permission policy per credential category."""

from types import MappingProxyType

from sshperms.policy.categories import Category

DIR_MODE = 0o700

POLICY = MappingProxyType({
    Category.PRIVATE_KEY: 0o600,
    Category.PUBLIC_KEY: 0o644,
    Category.AUTHORIZED_KEYS: 0o600,
    Category.CLIENT_CONFIG: 0o600,
    Category.KNOWN_HOSTS: 0o644,
})

# Roles that must never be readable or writable by group/other.
PRIVATE_CATEGORIES = frozenset({
    Category.PRIVATE_KEY,
    Category.AUTHORIZED_KEYS,
    Category.CLIENT_CONFIG,
})

GROUP_OTHER_BITS = 0o077


def target_mode(category: Category) -> int | None:
    """Return the target mode for a category, or None if it is left untouched."""
    return POLICY.get(category)


def target_dir_mode() -> int:
    return DIR_MODE


def format_mode(mode: int | None) -> str:
    """Render a mode as a zero-padded octal triple (``0600``)."""
    if mode is None:
        return "-"
    return f"{mode:04o}"
