from typing import Iterable, List

from core.exceptions import AccessDeniedError
from core.logging_config import get_logger
from services.privileges import PrivilegeResolver

logger = get_logger(__name__)


def effective_privileges(
    stored_privileges: Iterable[str], resolver: PrivilegeResolver
) -> List[str]:
    """
    Privileges a role grants today.

    Stored role paths are expanded again against the current mapping table, so
    privileges added to a role definition after the role was saved apply too.
    """
    stored = list(stored_privileges)
    role_paths = [p for p in stored if resolver.registry.is_role_path(p)]
    return list(dict.fromkeys(stored + resolver.expand_selected_roles(role_paths)))


class AccessControl:
    """Answers privilege questions for one authenticated admin user."""

    def __init__(self, user_id: str, privileges: Iterable[str], admin: bool = False) -> None:
        self.user_id = user_id
        self.admin = admin
        self._privileges = frozenset(privileges)

    @property
    def privileges(self) -> frozenset[str]:
        return self._privileges

    def can(self, privilege: str) -> bool:
        return self.admin or privilege in self._privileges

    def missing(self, privileges: Iterable[str]) -> List[str]:
        return [p for p in privileges if not self.can(p)]

    def ensure(self, *privileges: str) -> None:
        missing = self.missing(privileges)
        if missing:
            logger.warning(f"Access denied for user {self.user_id}: missing {missing}")
            raise AccessDeniedError("Access denied", missing=tuple(missing))
