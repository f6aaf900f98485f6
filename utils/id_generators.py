import secrets
import string
import uuid

from typing_extensions import LiteralString

ID_LENGTH = 6


def _random_string(chars: LiteralString, length: int) -> str:
    return "".join(secrets.choice(seq=chars) for _ in range(length))


## for acl_roles.role_id and admin_users.user_id
def generate_digits_lowercase(length: int = ID_LENGTH) -> str:
    """
    Random id of digits and lowercase letters, sized for the String(6) keys
    of the ACL tables.
    """
    return _random_string(string.digits + string.ascii_lowercase, length)


## for payment_methods.payment_method_id
def generate_digits_letters(length: int = ID_LENGTH) -> str:
    return _random_string(string.ascii_letters + string.digits, length)


## for product streams and their filters
def generate_hex_id() -> str:
    """32 character uuid4 hex, the key format of product stream rows."""
    return uuid.uuid4().hex
