"""이벤트 유형 상수"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # item
    ITEM_CREATED = "item_created"
    ITEM_SOLD = "item_sold"
    ITEM_PURCHASED = "item_purchased"

    # rewards
    REWARDS_GENERATED = "rewards_generated"
    REWARDS_CLAIMED = "rewards_claimed"

    # forge
    ITEM_IMPROVED = "item_improved"
    IMPROVEMENT_FAILED = "improvement_failed"

    # currency
    CURRENCY_CHANGED = "currency_changed"

    # energy
    ENERGY_SPENT = "energy_spent"
    HERO_SLEPT = "hero_slept"
    HERO_WOKE = "hero_woke"
