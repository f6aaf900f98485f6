# constants/privilege_mappings.py

from typing import Callable, Dict, List

# Categories shown as separate sections in the admin panel
CATEGORY_PERMISSIONS = "permissions"
CATEGORY_ADDITIONAL = "additional_permissions"


def crud_roles(key: str, entities: List[str], extra_read: List[str] | None = None) -> dict:
    """Viewer/editor/creator/deleter roles over ``entities`` for mapping ``key``."""
    viewer = f"{key}.viewer"
    editor = f"{key}.editor"
    return {
        "viewer": {
            "privileges": [f"{e}:read" for e in entities] + list(extra_read or []),
            "dependencies": [],
        },
        "editor": {
            "privileges": [f"{e}:update" for e in entities],
            "dependencies": [viewer],
        },
        "creator": {
            "privileges": [f"{e}:create" for e in entities],
            "dependencies": [viewer, editor],
        },
        "deleter": {
            "privileges": [f"{e}:delete" for e in entities],
            "dependencies": [viewer],
        },
    }


def payment_mappings() -> List[dict]:
    return [
        {
            "category": CATEGORY_PERMISSIONS,
            "parent": None,
            "key": "payment",
            "roles": crud_roles("payment", ["payment_method"], extra_read=["rule:read"]),
        }
    ]


def product_mappings() -> List[dict]:
    return [
        {
            "category": CATEGORY_PERMISSIONS,
            "parent": None,
            "key": "product",
            "roles": crud_roles("product", ["product"], extra_read=["tax:read"]),
        },
        {
            "category": CATEGORY_PERMISSIONS,
            "parent": "product",
            "key": "product_stream",
            "roles": crud_roles(
                "product_stream",
                ["product_stream", "product_stream_filter"],
                extra_read=["product:read"],
            ),
        },
    ]


def users_and_permissions_mappings() -> List[dict]:
    return [
        {
            "category": CATEGORY_PERMISSIONS,
            "parent": None,
            "key": "users_and_permissions",
            "roles": {
                "viewer": {
                    "privileges": ["acl_role:read", "user:read"],
                    "dependencies": [],
                },
                "editor": {
                    "privileges": ["acl_role:update", "user:update"],
                    "dependencies": ["users_and_permissions.viewer"],
                },
                "creator": {
                    "privileges": ["acl_role:create", "user:create"],
                    "dependencies": [
                        "users_and_permissions.viewer",
                        "users_and_permissions.editor",
                    ],
                },
                "deleter": {
                    "privileges": ["acl_role:delete", "user:delete"],
                    "dependencies": ["users_and_permissions.viewer"],
                },
            },
        }
    ]


def additional_mappings() -> List[dict]:
    return [
        {
            "category": CATEGORY_ADDITIONAL,
            "parent": None,
            "key": "system",
            "roles": {
                "clear_cache": {
                    "privileges": ["system:clear:cache"],
                    "dependencies": [],
                },
            },
        },
        {
            "category": CATEGORY_ADDITIONAL,
            "parent": None,
            "key": "orders",
            "roles": {
                "create_discounts": {
                    "privileges": ["order:create:discount"],
                    "dependencies": [],
                },
            },
        },
    ]


# Feature modules contributing mapping entries, applied in this order at start-up
DEFAULT_MAPPING_CONTRIBUTORS: Dict[str, Callable[[], List[dict]]] = {
    "payment": payment_mappings,
    "product": product_mappings,
    "users_and_permissions": users_and_permissions_mappings,
    "additional": additional_mappings,
}
