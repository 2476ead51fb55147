"""
Slug Generation Utilities
Builds URL slugs for categories and products when the admin leaves them blank
"""

import re
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select


def slugify(text: str) -> str:
    """'Mobile Legends: Bang Bang' -> 'mobile-legends-bang-bang'"""
    slug = re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-')
    return slug[:80]


async def generate_unique_slug(name: str, model, db: AsyncSession) -> str:
    """Generate a unique slug for ``model`` from a display name, handling conflicts"""

    base_slug = slugify(name)

    if not base_slug:
        # Fallback if the name is all special characters (e.g. only emoji)
        base_slug = "item"

    # Check if base slug is available
    result = await db.execute(select(model.id).where(model.slug == base_slug))
    if result.scalar_one_or_none() is None:
        return base_slug

    # If conflict, try with numeric suffixes
    for i in range(2, 100):
        candidate_slug = f"{base_slug}-{i}"
        result = await db.execute(select(model.id).where(model.slug == candidate_slug))
        if result.scalar_one_or_none() is None:
            return candidate_slug

    # Ultimate fallback: use part of UUID
    return f"{base_slug}-{str(uuid.uuid4())[:8]}"
