# services/init_roles_permissions.py
from typing import Callable, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from constants.privilege_mappings import DEFAULT_MAPPING_CONTRIBUTORS
from core.config import settings
from core.logging_config import get_logger
from db.models.acl import AdminUser
from services.privileges import PrivilegeMappingRegistry
from utils.auth import hash_password
from utils.id_generators import generate_digits_lowercase

logger = get_logger(__name__)


def build_privilege_registry(
    contributors: Optional[Dict[str, Callable[[], List[dict]]]] = None,
) -> PrivilegeMappingRegistry:
    """Run every mapping contributor once, then freeze the registry."""
    contributors = DEFAULT_MAPPING_CONTRIBUTORS if contributors is None else contributors
    registry = PrivilegeMappingRegistry()

    for name, contribute in contributors.items():
        entries = contribute()
        for entry in entries:
            registry.add_privilege_mapping_entry(entry)
        logger.info(f"Mapping contributor '{name}' registered {len(entries)} entries")

    registry.freeze()
    return registry


async def init_superadmin(db: AsyncSession) -> None:
    result = await db.execute(
        select(AdminUser).where(AdminUser.username == settings.SUPERADMIN_USERNAME)
    )
    if result.scalar_one_or_none():
        return

    db.add(
        AdminUser(
            user_id=generate_digits_lowercase(),
            username=settings.SUPERADMIN_USERNAME,
            email=settings.SUPERADMIN_EMAIL.lower(),
            password=hash_password(settings.SUPERADMIN_PASSWORD),
            admin=True,
            is_active=True,
        )
    )
    await db.commit()
    logger.info(f"Seeded super admin '{settings.SUPERADMIN_USERNAME}'")
