"""Game API endpoints."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Request

from heroforge.api.schemas import (
    ClaimRewardsRequest,
    ClaimRewardsResponse,
    CurrencyRequest,
    EnergyResponse,
    ErrorResponse,
    ForgePreviewResponse,
    ImproveResponse,
    ItemRequest,
    ProfileResponse,
    PurchaseRequest,
    RegisterRequest,
    ShopItemInfo,
    SpendEnergyRequest,
    TickRequest,
    TradeResponse,
)
from heroforge.core.logging import get_logger
from heroforge.core.loot.catalog import parse_policy
from heroforge.services.energy_service import EnergyService
from heroforge.services.forge_service import ForgeService
from heroforge.services.player_service import PlayerService
from heroforge.services.reward_service import RewardService
from heroforge.services.shop_service import ShopService

logger = get_logger(__name__)

router = APIRouter(prefix="/game", tags=["game"])

NOT_FOUND = {404: {"model": ErrorResponse}}


def get_player_service(request: Request) -> PlayerService:
    """PlayerService 인스턴스 반환 (의존성 주입)"""
    service: PlayerService = request.app.state.player_service
    return service


def get_reward_service(request: Request) -> RewardService:
    """RewardService 인스턴스 반환 (의존성 주입)"""
    service: RewardService = request.app.state.reward_service
    return service


def get_forge_service(request: Request) -> ForgeService:
    """ForgeService 인스턴스 반환 (의존성 주입)"""
    service: ForgeService = request.app.state.forge_service
    return service


def get_energy_service(request: Request) -> EnergyService:
    """EnergyService 인스턴스 반환 (의존성 주입)"""
    service: EnergyService = request.app.state.energy_service
    return service


def get_shop_service(request: Request) -> ShopService:
    """ShopService 인스턴스 반환 (의존성 주입)"""
    service: ShopService = request.app.state.shop_service
    return service


# === Player ===


@router.post("/register", response_model=ProfileResponse, responses={409: {"model": ErrorResponse}})
def register_player(
    request: RegisterRequest,
    service: PlayerService = Depends(get_player_service),
) -> ProfileResponse:
    """
    플레이어 등록

    재화 STARTING_CURRENCY, 에너지 100, 빈 인벤토리로 시작합니다.
    """
    try:
        profile = service.register_player(request.player_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    logger.info("Player registered: %s", request.player_id)
    return ProfileResponse(**profile)


@router.get("/players/{player_id}", response_model=ProfileResponse, responses=NOT_FOUND)
def get_profile(
    player_id: str,
    service: PlayerService = Depends(get_player_service),
) -> ProfileResponse:
    """프로필 조회 (재화, 에너지, 인벤토리)"""
    try:
        return ProfileResponse(**service.get_profile(player_id))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/players/{player_id}/currency", responses=NOT_FOUND)
def grant_currency(
    player_id: str,
    request: CurrencyRequest,
    service: PlayerService = Depends(get_player_service),
) -> dict[str, int]:
    """재화 지급. 음수는 무시됩니다."""
    try:
        return {"currency": service.grant_currency(player_id, request.amount)}
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


# === Rewards ===


@router.post(
    "/players/{player_id}/rewards",
    response_model=ClaimRewardsResponse,
    responses=NOT_FOUND,
)
def claim_rewards(
    player_id: str,
    request: ClaimRewardsRequest,
    service: RewardService = Depends(get_reward_service),
) -> ClaimRewardsResponse:
    """
    전투 보상 지급

    encounter를 지정하면 해당 조우 정책, 아니면 요청의 정책으로 생성합니다.
    인벤토리에 들어가지 못한 보상은 overflow로 돌려줍니다.
    """
    try:
        if request.encounter:
            policy = service.resolve_policy(request.encounter)
        else:
            policy = parse_policy(request.model_dump(exclude={"encounter", "currency"}))
    except ValueError as e:
        if request.encounter:
            raise HTTPException(status_code=404, detail=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = service.claim_rewards(player_id, policy, currency=request.currency)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ClaimRewardsResponse(**result)


# === Forge ===


@router.get(
    "/players/{player_id}/forge/{instance_id}",
    response_model=ForgePreviewResponse,
    responses=NOT_FOUND,
)
def forge_preview(
    player_id: str,
    instance_id: str,
    service: ForgeService = Depends(get_forge_service),
) -> ForgePreviewResponse:
    """강화 미리보기 (상태 변경 없음)"""
    try:
        info = service.preview(player_id, instance_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ForgePreviewResponse(**asdict(info))


@router.post(
    "/players/{player_id}/forge",
    response_model=ImproveResponse,
    responses=NOT_FOUND,
)
def forge_improve(
    player_id: str,
    request: ItemRequest,
    service: ForgeService = Depends(get_forge_service),
) -> ImproveResponse:
    """
    아이템 강화

    재화 부족 / 최대 레벨은 success=false와 reason으로 응답합니다.
    """
    try:
        result = service.improve_item(player_id, request.instance_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ImproveResponse(
        success=result.success,
        reason=result.reason.value if result.reason else None,
        cost=result.cost,
        new_level=result.new_level,
        new_balance=result.new_balance,
    )


# === Energy ===


@router.get("/players/{player_id}/energy", response_model=EnergyResponse, responses=NOT_FOUND)
def get_energy(
    player_id: str,
    service: EnergyService = Depends(get_energy_service),
) -> EnergyResponse:
    try:
        return EnergyResponse(**service.get_energy(player_id))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/players/{player_id}/energy/spend",
    response_model=EnergyResponse,
    responses=NOT_FOUND,
)
def spend_energy(
    player_id: str,
    request: SpendEnergyRequest,
    service: EnergyService = Depends(get_energy_service),
) -> EnergyResponse:
    """에너지 사용. 자는 중이면 먼저 깨어납니다."""
    try:
        return EnergyResponse(**service.spend(player_id, request.amount))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/players/{player_id}/energy/sleep",
    response_model=EnergyResponse,
    responses=NOT_FOUND,
)
def sleep(
    player_id: str,
    service: EnergyService = Depends(get_energy_service),
) -> EnergyResponse:
    try:
        return EnergyResponse(**service.sleep(player_id))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/players/{player_id}/energy/wake",
    response_model=EnergyResponse,
    responses=NOT_FOUND,
)
def wake(
    player_id: str,
    service: EnergyService = Depends(get_energy_service),
) -> EnergyResponse:
    try:
        return EnergyResponse(**service.wake(player_id))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/players/{player_id}/energy/tick",
    response_model=EnergyResponse,
    responses=NOT_FOUND,
)
def tick(
    player_id: str,
    request: TickRequest,
    service: EnergyService = Depends(get_energy_service),
) -> EnergyResponse:
    """수면 회복 진행. 경과 시간은 클라이언트가 보냅니다."""
    try:
        return EnergyResponse(**service.tick(player_id, request.elapsed_seconds))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


# === Shop ===


@router.get("/shop", response_model=list[ShopItemInfo])
def list_shop(
    service: ShopService = Depends(get_shop_service),
) -> list[ShopItemInfo]:
    return [ShopItemInfo(**item) for item in service.list_stock()]


@router.post(
    "/players/{player_id}/shop/purchase",
    response_model=TradeResponse,
    responses=NOT_FOUND,
)
def purchase(
    player_id: str,
    request: PurchaseRequest,
    service: ShopService = Depends(get_shop_service),
) -> TradeResponse:
    try:
        return TradeResponse(**service.purchase(player_id, request.archetype_key))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/players/{player_id}/shop/sell",
    response_model=TradeResponse,
    responses=NOT_FOUND,
)
def sell(
    player_id: str,
    request: ItemRequest,
    service: ShopService = Depends(get_shop_service),
) -> TradeResponse:
    try:
        return TradeResponse(**service.sell(player_id, request.instance_id))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
