"""
Privilege mapping table and resolver.

The mapping table collects the role definitions contributed by feature
modules during start-up. The resolver translates between the role paths an
admin selects (``"payment.editor"``) and the privilege strings the backend
enforces (``"payment_method:update"``).
"""

from typing import Dict, Iterable, List, Optional, Sequence

from core.exceptions import (
    DuplicatePrivilegeKeyError,
    InvalidPrivilegeMappingError,
    RegistryFrozenError,
)
from core.logging_config import get_logger
from schemas.privileges import ROLE_PATH_SEPARATOR, PrivilegeMappingEntry, RoleDefinition

logger = get_logger(__name__)


def split_role_path(role_path: str) -> tuple[str, str]:
    key, _, role = role_path.partition(ROLE_PATH_SEPARATOR)
    return key, role


class PrivilegeMappingRegistry:
    """
    Registry of privilege mapping entries.

    Entries are added during the start-up phase. ``freeze()`` ends that phase;
    from then on the registry is read-only. Keys are unique: registering a key
    twice raises ``DuplicatePrivilegeKeyError``.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, PrivilegeMappingEntry] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add_privilege_mapping_entry(
        self, entry: PrivilegeMappingEntry | dict
    ) -> PrivilegeMappingEntry:
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register '{_entry_key(entry)}': privilege mappings are read-only after start-up."
            )

        if not isinstance(entry, PrivilegeMappingEntry):
            entry = PrivilegeMappingEntry.model_validate(entry)

        if entry.key in self._entries:
            raise DuplicatePrivilegeKeyError(
                f"Privilege mapping key '{entry.key}' is already registered."
            )

        self._entries[entry.key] = entry
        logger.debug(
            f"Registered privilege mapping '{entry.key}' with roles {list(entry.roles)}"
        )
        return entry

    def freeze(self) -> None:
        """Validate parent references and make the registry read-only."""
        for entry in self._entries.values():
            if entry.parent is not None and entry.parent not in self._entries:
                raise InvalidPrivilegeMappingError(
                    f"Mapping '{entry.key}' references unknown parent '{entry.parent}'."
                )
            for role_name, definition in entry.roles.items():
                for dependency in definition.dependencies:
                    if self.get_role(dependency) is None:
                        logger.warning(
                            f"Role '{entry.key}.{role_name}' depends on unknown role '{dependency}'"
                        )
        self._frozen = True
        logger.info(f"Privilege mapping table frozen with {len(self._entries)} entries")

    def get_privileges_mappings(self) -> List[PrivilegeMappingEntry]:
        return list(self._entries.values())

    def get_entry(self, key: str) -> Optional[PrivilegeMappingEntry]:
        return self._entries.get(key)

    def get_role(self, role_path: str) -> Optional[RoleDefinition]:
        key, role = split_role_path(role_path)
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.roles.get(role)

    def is_role_path(self, role_path: str) -> bool:
        return self.get_role(role_path) is not None

    def role_paths(self) -> List[str]:
        """All role paths in registration order."""
        return [path for entry in self._entries.values() for path in entry.role_paths()]

    def children_of(self, key: str) -> List[PrivilegeMappingEntry]:
        return [entry for entry in self._entries.values() if entry.parent == key]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


def _entry_key(entry: PrivilegeMappingEntry | dict) -> str:
    if isinstance(entry, PrivilegeMappingEntry):
        return entry.key
    return str(entry.get("key"))


class PrivilegeResolver:
    """Pure, in-memory translation between role selections and privileges."""

    def __init__(
        self,
        registry: PrivilegeMappingRegistry,
        required_privileges: Sequence[str] = (),
    ) -> None:
        self._registry = registry
        self._required_privileges = list(dict.fromkeys(required_privileges))

    @property
    def registry(self) -> PrivilegeMappingRegistry:
        return self._registry

    @property
    def required_privileges(self) -> List[str]:
        return list(self._required_privileges)

    def filter_selected_roles(self, raw_privileges: Iterable[str]) -> List[str]:
        """
        Reduce a stored privilege list to the role paths it selects.

        A role is selected when its path is stored, or when every one of its
        privileges is stored. Privilege strings themselves never appear in the
        result, so unmapped legacy privileges are dropped.
        """
        raw = set(raw_privileges)
        selected: List[str] = []
        for entry in self._registry.get_privileges_mappings():
            for role_name, definition in entry.roles.items():
                role_path = f"{entry.key}{ROLE_PATH_SEPARATOR}{role_name}"
                if role_path in raw:
                    selected.append(role_path)
                elif definition.privileges and raw.issuperset(definition.privileges):
                    selected.append(role_path)
        return selected

    def expand_selected_roles(self, selected_roles: Iterable[str]) -> List[str]:
        """
        Expand role paths into the full privilege list to persist.

        Roles are emitted in registration order: the role path, its privileges,
        then its dependencies, each role at most once. Unknown role paths are
        ignored. Required privileges come last.
        """
        selected = set(selected_roles)
        expanded: Dict[str, None] = {}
        visited: set[str] = set()

        for role_path in self._registry.role_paths():
            if role_path in selected:
                self._expand_role(role_path, expanded, visited)

        for privilege in self._required_privileges:
            expanded.setdefault(privilege)

        return list(expanded)

    def _expand_role(
        self, role_path: str, expanded: Dict[str, None], visited: set[str]
    ) -> None:
        if role_path in visited:
            return
        visited.add(role_path)

        definition = self._registry.get_role(role_path)
        if definition is None:
            logger.debug(f"Ignoring unknown role '{role_path}' during expansion")
            return

        expanded.setdefault(role_path)
        for privilege in definition.privileges:
            expanded.setdefault(privilege)
        for dependency in definition.dependencies:
            self._expand_role(dependency, expanded, visited)
