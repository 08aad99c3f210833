from collections import Counter

from fastapi import APIRouter, Depends

from app.deps import get_storage
from app.schemas.build import ACTIVITY_TYPES, BuildStatsOut, WeaponCount
from app.storage import Storage

router = APIRouter()


@router.get("/stats", response_model=BuildStatsOut)
async def build_stats(storage: Storage = Depends(get_storage)):
    """Build counts per activity type and most used weapons."""
    builds = storage.get_builds()
    weapons = Counter(b.equipment.weapon.name for b in builds)
    return BuildStatsOut(
        total_builds=len(builds),
        meta_builds=sum(1 for b in builds if b.is_meta),
        by_activity_type=dict(Counter(b.activity_type for b in builds)),
        top_weapons=[
            WeaponCount(name=name, count=count) for name, count in weapons.most_common(10)
        ],
    )


@router.get("/activity-types")
async def list_activity_types():
    return list(ACTIVITY_TYPES)
