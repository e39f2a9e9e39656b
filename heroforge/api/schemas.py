"""API request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field


# === Request Schemas ===


class RegisterRequest(BaseModel):
    """플레이어 등록 요청"""

    player_id: str = Field(..., min_length=1, max_length=50, description="플레이어 ID")


class ClaimRewardsRequest(BaseModel):
    """보상 지급 요청. encounter가 없으면 직접 지정한 정책 사용."""

    encounter: Optional[str] = Field(None, description="reward_tiers.json의 조우 이름")
    count: int = Field(1, description="보상 개수")
    allowed_tiers: list[int] = Field(default_factory=list, description="허용 티어 (1-based)")
    distribution: str = Field("random", description="even | random")
    forced_rewards: list[str] = Field(default_factory=list, description="고정 보상 key")
    currency: int = Field(0, ge=0, description="함께 지급할 재화")


class ItemRequest(BaseModel):
    """인스턴스 대상 요청 (강화, 판매)"""

    instance_id: str = Field(..., min_length=1)


class PurchaseRequest(BaseModel):
    archetype_key: str = Field(..., min_length=1)


class SpendEnergyRequest(BaseModel):
    amount: int = Field(..., description="사용할 에너지")


class TickRequest(BaseModel):
    elapsed_seconds: float = Field(..., description="경과 시간(초)")


class CurrencyRequest(BaseModel):
    amount: int


# === Response Schemas ===


class StatsInfo(BaseModel):
    """스탯 묶음"""

    hp: int = 0
    mana: int = 0
    attack: int = 0
    defense: int = 0
    attack_speed: int = 0
    crit_chance: int = 0
    crit_damage: int = 0
    luck: int = 0
    dexterity: int = 0


class ItemInfo(BaseModel):
    slot_index: int
    instance_id: str
    archetype_key: str
    display_name: str
    level: int
    stats: StatsInfo


class ProfileResponse(BaseModel):
    """플레이어 프로필"""

    player_id: str
    currency: int
    energy: int
    is_sleeping: bool
    inventory_capacity: int
    items: list[ItemInfo] = []


class GrantedItem(BaseModel):
    instance_id: str
    archetype_key: str
    level: int


class ClaimRewardsResponse(BaseModel):
    success: bool
    reason: Optional[str] = None
    granted: list[GrantedItem] = []
    overflow: list[str] = []
    currency: int


class ForgePreviewResponse(BaseModel):
    """강화 미리보기"""

    level: int
    max_level: int
    can_improve: bool
    cost: Optional[int] = None
    affordable: bool
    current_stats: StatsInfo
    projected_stats: StatsInfo


class ImproveResponse(BaseModel):
    success: bool
    reason: Optional[str] = None
    cost: Optional[int] = None
    new_level: int
    new_balance: int


class EnergyResponse(BaseModel):
    success: bool = True
    energy: int
    state: str
    is_sleeping: bool
    woke: bool = False


class ShopItemInfo(BaseModel):
    archetype_key: str
    display_name: str
    item_type: str
    rarity: str
    price: int


class TradeResponse(BaseModel):
    """구매/판매 결과"""

    success: bool
    reason: Optional[str] = None
    currency: int
    instance_id: Optional[str] = None
    slot_index: Optional[int] = None
    price: Optional[int] = None


class ErrorResponse(BaseModel):
    """에러 응답"""

    success: bool = False
    error: str
    detail: Optional[str] = None
