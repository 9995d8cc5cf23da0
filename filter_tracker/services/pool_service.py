"""
Pool Assignment Rule

Accessories are split into two fixed pools. Filter 4 draws from its own pool,
filters 1-3 share the other one. An accessory is only ever offered to filters
of its pool.
"""

from typing import Iterable, List

from ..models.accessory import AccessoryPool
from ..models.filter import FILTER_IDS
from ..utils.errors import NotFoundError

POOL_BY_FILTER = {
    1: AccessoryPool.POOL_A,
    2: AccessoryPool.POOL_A,
    3: AccessoryPool.POOL_A,
    4: AccessoryPool.POOL_B,
}


def pool_for(filter_id: int) -> AccessoryPool:
    if filter_id not in FILTER_IDS:
        raise NotFoundError("Filter", filter_id)
    return POOL_BY_FILTER[filter_id]


def is_visible_to(filter_id: int, accessory) -> bool:
    return AccessoryPool(accessory.pool) == pool_for(filter_id)


def accessories_visible_to(filter_id: int, accessories: Iterable) -> List:
    pool = pool_for(filter_id)
    return [a for a in accessories if AccessoryPool(a.pool) == pool]
