"""Domain exceptions for the admin ACL service."""

from fastapi import status


class AclError(Exception):
    """Base exception for privilege and role handling."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An ACL error occurred"):
        self.message = message
        super().__init__(self.message)


class DuplicatePrivilegeKeyError(AclError):
    """Raised when two mapping entries are registered under the same key."""

    status_code = status.HTTP_409_CONFLICT


class RegistryFrozenError(AclError):
    """Raised when an entry is registered after start-up has finished."""

    status_code = status.HTTP_409_CONFLICT


class InvalidPrivilegeMappingError(AclError):
    """Raised when a mapping entry is malformed."""

    status_code = 422


class UnknownRoleError(AclError):
    """Raised when a role path is selected that no mapping entry defines."""

    status_code = 422


class RoleNotFoundError(AclError):
    status_code = status.HTTP_404_NOT_FOUND


class RoleNotLoadedError(AclError):
    """Raised when the editor is used before a role was loaded."""

    status_code = status.HTTP_409_CONFLICT


class RoleNotModifiedError(AclError):
    """Raised when saving a role whose selection was not edited."""

    status_code = status.HTTP_409_CONFLICT


class VerificationRequiredError(AclError):
    """Raised when a role save is attempted without re-authentication."""

    status_code = status.HTTP_403_FORBIDDEN


class RoleSaveError(AclError):
    """Raised when the backing store rejects a role save."""

    status_code = status.HTTP_502_BAD_GATEWAY


class AccessDeniedError(AclError):
    """Raised when a user lacks a privilege for the requested action."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Access denied", missing: tuple = ()):
        self.missing = tuple(missing)
        super().__init__(message)
