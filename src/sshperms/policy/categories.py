"""Credential categories and name-based classification."""

import os
import stat
from enum import Enum
from pathlib import Path

PRIVATE_KEY_PREFIX = "id_"
PUBLIC_KEY_SUFFIX = ".pub"


class Category(str, Enum):
    PRIVATE_KEY = "private_key"
    PUBLIC_KEY = "public_key"
    AUTHORIZED_KEYS = "authorized_keys"
    CLIENT_CONFIG = "client_config"
    KNOWN_HOSTS = "known_hosts"
    UNCLASSIFIED = "unclassified"


def classify(name: str) -> Category:
    """Map a file name to its credential category.

    First match wins. Only the name is inspected, never the contents, so an
    ``id_*`` file holding arbitrary bytes is still a private key.
    """
    is_public = name.endswith(PUBLIC_KEY_SUFFIX)

    if name.startswith(PRIVATE_KEY_PREFIX) and not is_public:
        return Category.PRIVATE_KEY
    if is_public:
        return Category.PUBLIC_KEY
    if name.startswith("authorized_keys"):
        return Category.AUTHORIZED_KEYS
    if name.startswith("config"):
        return Category.CLIENT_CONFIG
    # known_hosts, known_hosts.old, known_hosts.bak-2024 ...
    if name == "known_hosts" or name.startswith("known_hosts."):
        return Category.KNOWN_HOSTS
    return Category.UNCLASSIFIED


def classify_entry(path: Path, st: os.stat_result) -> Category:
    """Classify a directory entry from its lstat result.

    Directories, symlinks and other non-regular entries are unclassified.
    """
    if not stat.S_ISREG(st.st_mode):
        return Category.UNCLASSIFIED
    return classify(path.name)
