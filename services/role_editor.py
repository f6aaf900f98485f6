"""
Service-side state of the role detail screen.

The editor loads a role from the backing store, exposes its privileges as a
selection of role paths, tracks whether that selection was edited and saves
the expanded privilege list once the user has re-verified their identity.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol

from core.exceptions import (
    AclError,
    RoleNotFoundError,
    RoleNotLoadedError,
    RoleSaveError,
    UnknownRoleError,
    VerificationRequiredError,
)
from core.logging_config import get_logger
from services.privileges import PrivilegeResolver

logger = get_logger(__name__)


@dataclass(frozen=True)
class VerificationContext:
    """Proof that the acting user re-entered their password."""

    user_id: str
    access: str


class RoleRepository(Protocol):
    async def get(self, role_id: str) -> Optional[Dict[str, Any]]: ...

    async def save(
        self, role_id: str, role: Dict[str, Any], context: VerificationContext
    ) -> None: ...


class RoleDetailEditor:
    def __init__(self, resolver: PrivilegeResolver, repository: RoleRepository) -> None:
        self._resolver = resolver
        self._repository = repository
        self.role_id: Optional[str] = None
        self.raw_privileges: List[str] = []
        self._selected: set[str] = set()
        self._original: frozenset[str] = frozenset()

    @property
    def loaded(self) -> bool:
        return self.role_id is not None

    @property
    def required_privileges(self) -> List[str]:
        return self._resolver.required_privileges

    async def load(self, role_id: str) -> List[str]:
        """Fetch the role and derive its role selection from the stored privileges."""
        role = await self._repository.get(role_id)
        if role is None:
            raise RoleNotFoundError(f"ACL role '{role_id}' not found.")

        self.role_id = role_id
        self.raw_privileges = list(role.get("privileges") or [])
        self._selected = set(self._resolver.filter_selected_roles(self.raw_privileges))
        self._original = frozenset(self._selected)
        return self.selected_roles

    @property
    def selected_roles(self) -> List[str]:
        # registration order keeps responses and saves deterministic
        return [
            path
            for path in self._resolver.registry.role_paths()
            if path in self._selected
        ]

    def _check_role(self, role_path: str) -> None:
        if not self._resolver.registry.is_role_path(role_path):
            raise UnknownRoleError(f"Unknown role '{role_path}'.")

    def select_role(self, role_path: str) -> None:
        self._ensure_loaded()
        self._check_role(role_path)
        self._selected.add(role_path)

    def deselect_role(self, role_path: str) -> None:
        self._ensure_loaded()
        self._selected.discard(role_path)

    def toggle_role(self, role_path: str) -> bool:
        """Flip a role checkbox; returns whether the role is now selected."""
        if role_path in self._selected:
            self.deselect_role(role_path)
            return False
        self.select_role(role_path)
        return True

    def set_selection(self, role_paths: Iterable[str]) -> None:
        self._ensure_loaded()
        role_paths = list(role_paths)
        for role_path in role_paths:
            self._check_role(role_path)
        self._selected = set(role_paths)

    @property
    def is_dirty(self) -> bool:
        return self.loaded and frozenset(self._selected) != self._original

    @property
    def can_save(self) -> bool:
        """The save action stays disabled until the selection was edited."""
        return self.is_dirty

    def privileges_to_save(self) -> List[str]:
        return self._resolver.expand_selected_roles(self._selected)

    async def save_role(self, context: Optional[VerificationContext]) -> List[str]:
        self._ensure_loaded()
        if context is None or not context.access:
            raise VerificationRequiredError(
                "Please confirm your password before saving the role."
            )

        privileges = self.privileges_to_save()
        try:
            await self._repository.save(self.role_id, {"privileges": privileges}, context)
        except AclError:
            raise
        except Exception as exc:
            logger.exception(f"Saving ACL role {self.role_id} failed")
            raise RoleSaveError(f"Role '{self.role_id}' could not be saved.") from exc

        logger.info(
            f"ACL role {self.role_id} saved by {context.user_id} "
            f"with {len(privileges)} privileges"
        )
        self.raw_privileges = privileges
        self._original = frozenset(self._selected)
        return privileges

    def _ensure_loaded(self) -> None:
        if not self.loaded:
            raise RoleNotLoadedError("No role loaded. Call load() first.")
