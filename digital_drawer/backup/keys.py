"""
Backup Section Keys

The live store keeps each section under a namespaced key ("@home_history").
Backup files written by the app carry the same namespaced keys; files using
the bare names ("home_history") are accepted as well.

Two sections were renamed in the app's history. The old names are still
accepted in backups and restored under the new names:

    homes_list      -> home_homes
    current_home_id -> home_selected_id
"""

NAMESPACE_PREFIX = "@"

BACKUP_DATE_KEY = "_backup_date"
APP_VERSION_KEY = "_app_version"
METADATA_KEYS = (BACKUP_DATE_KEY, APP_VERSION_KEY)

HOME_PROFILE = "home_profile"
HOME_HISTORY = "home_history"
HOME_HOMES = "home_homes"
HOMES_LIST = "homes_list"
HOME_SELECTED_ID = "home_selected_id"
CURRENT_HOME_ID = "current_home_id"
HOME_XP = "home_xp"
FINANCE_TRANSACTIONS = "finance_transactions"
FINANCE_SAVINGS = "finance_savings"

# canonical name -> legacy name
LEGACY_ALIASES = {
    HOME_HOMES: HOMES_LIST,
    HOME_SELECTED_ID: CURRENT_HOME_ID,
}

# The seven sections, in export and restore order
SECTIONS = (
    HOME_PROFILE,
    HOME_HISTORY,
    HOME_HOMES,
    HOME_SELECTED_ID,
    HOME_XP,
    FINANCE_TRANSACTIONS,
    FINANCE_SAVINGS,
)

# Every top-level name a backup may contain
ALLOWED_NAMES = frozenset(
    SECTIONS + tuple(LEGACY_ALIASES.values()) + METADATA_KEYS
)


def logical_name(key: str, prefix: str = NAMESPACE_PREFIX) -> str:
    """Strip one leading namespace prefix from a document key."""
    if prefix and key.startswith(prefix):
        return key[len(prefix):]
    return key


def storage_key(name: str, prefix: str = NAMESPACE_PREFIX) -> str:
    """Namespaced storage key for a section name."""
    return f"{prefix}{name}"


def find_section(document: dict, name: str, prefix: str = NAMESPACE_PREFIX) -> tuple[str, bool]:
    """
    Locate a section in a document by its logical name.

    Looks for the namespaced key first, then the bare name.

    Returns:
        (document_key, found)
    """
    for key in (storage_key(name, prefix), name):
        if key in document:
            return key, True
    return name, False


def find_section_with_alias(
    document: dict,
    name: str,
    prefix: str = NAMESPACE_PREFIX,
) -> tuple[str, bool]:
    """Like find_section, falling back to the section's legacy name."""
    key, found = find_section(document, name, prefix)
    if not found and name in LEGACY_ALIASES:
        key, found = find_section(document, LEGACY_ALIASES[name], prefix)
    return key, found
