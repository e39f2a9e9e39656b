"""아이템 시스템 Core — 순수 Python, DB 무관"""

from .models import ItemArchetype, ItemInstance, ItemType, Rarity, StatBundle
from .registry import ArchetypeRegistry
from .progression import level_up, set_level, stats_at_level
from .codec import EMPTY_SLOT, DecodeResult, deserialize, serialize
from .inventory import Inventory
from .pricing import purchase_price, resale_price

__all__ = [
    "ItemType",
    "Rarity",
    "StatBundle",
    "ItemArchetype",
    "ItemInstance",
    "ArchetypeRegistry",
    "stats_at_level",
    "level_up",
    "set_level",
    "EMPTY_SLOT",
    "DecodeResult",
    "serialize",
    "deserialize",
    "Inventory",
    "purchase_price",
    "resale_price",
]
