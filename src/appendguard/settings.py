"""Policy store: the append-only settings and ~/.appendguard/settings.toml."""

from __future__ import annotations

import logging
import os
import stat
import tomllib
from pathlib import Path

from appendguard.errors import SettingError

logger = logging.getLogger(__name__)

PREFIX = "append_only_filter"
RELATIONS_SETTING = f"{PREFIX}.append_only_relations"
MODULE_LOADED_SETTING = f"{PREFIX}.module_loaded"

_SETTINGS_FILE = Path.home() / ".appendguard" / "settings.toml"


class PolicyStore:
    """Holds the protected-relation list and the module_loaded flag.

    The interceptor reads ``protected_relations`` on every consultation, so
    a change made here is enforced from the next statement on. Nothing is
    cached and nothing needs reloading.
    """

    def __init__(self, relations: str | None = None) -> None:
        self._relations = relations
        self._module_loaded = False

    @property
    def protected_relations(self) -> str | None:
        return self._relations

    @protected_relations.setter
    def protected_relations(self, value: str | None) -> None:
        self._relations = value

    @property
    def is_active(self) -> bool:
        """Diagnostic only: True while a filter built on this store is installed."""
        return self._module_loaded

    def mark_loaded(self, loaded: bool) -> None:
        self._module_loaded = loaded

    # -- Name-based access --------------------------------------------------------

    def get(self, name: str) -> str | bool | None:
        name = _full_name(name)
        if name == RELATIONS_SETTING:
            return self._relations
        return self._module_loaded

    def set(self, name: str, value: str | None) -> None:
        name = _full_name(name)
        if name == MODULE_LOADED_SETTING:
            raise SettingError(f'parameter "{name}" cannot be changed')
        if value is not None and not isinstance(value, str):
            raise SettingError(
                f"{name} must be a string, got {type(value).__name__}"
            )
        logger.debug("%s = %r", name, value)
        self._relations = value

    def reset(self, name: str) -> None:
        self.set(name, None)

    def show_all(self) -> dict[str, str | bool | None]:
        return {
            RELATIONS_SETTING: self._relations,
            MODULE_LOADED_SETTING: self._module_loaded,
        }


def _full_name(name: str) -> str:
    if "." not in name:
        name = f"{PREFIX}.{name}"
    if name not in (RELATIONS_SETTING, MODULE_LOADED_SETTING):
        raise SettingError(f'unrecognized configuration parameter "{name}"')
    return name


# -- Persistence ------------------------------------------------------------------


def _escape_toml_value(v: str) -> str:
    """Escape a string for safe inclusion in a TOML double-quoted value."""
    return v.replace("\\", "\\\\").replace('"', '\\"')


def _load_file(path: Path) -> dict:
    if not path.exists():
        return {}
    return tomllib.loads(path.read_text())


def _write_file(path: Path, relations: str) -> None:
    lines = [
        f"[{PREFIX}]",
        f'append_only_relations = "{_escape_toml_value(relations)}"',
        "",
    ]
    path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    path.write_text("\n".join(lines))
    os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)  # 0600


def read_relations(path: Path | None = None) -> str | None:
    """Return the configured relation list, or None if unset.

    The TOML value may be a string or a list of strings; a list is joined
    with commas.
    """
    data = _load_file(path or _SETTINGS_FILE)
    value = data.get(PREFIX, {}).get("append_only_relations")
    if value is None:
        return None
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    if not isinstance(value, str):
        raise SettingError(
            f"{RELATIONS_SETTING} must be a string or a list of strings, "
            f"got {type(value).__name__}"
        )
    return value


def load_store(path: Path | None = None) -> PolicyStore:
    """Build a PolicyStore from the settings file (empty if the file is missing)."""
    return PolicyStore(relations=read_relations(path))


def save_relations(relations: str, path: Path | None = None) -> Path:
    """Write the relation list to the settings file."""
    path = path or _SETTINGS_FILE
    _write_file(path, relations)
    return path


def clear_relations(path: Path | None = None) -> bool:
    """Remove the settings file. Returns True if it existed."""
    path = path or _SETTINGS_FILE
    if not path.exists():
        return False
    path.unlink()
    return True
