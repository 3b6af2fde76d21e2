"""Stateless pricing endpoints for live-editing forms."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from showroom.pricing import (
    MAX_TRANSPORT_COUNT,
    VehicleMarginBreakdown,
    VehicleMarginInput,
    calculate_transport_cost_per_car_eur,
    calculate_transport_cost_total_eur,
    calculate_vehicle_margin_breakdown,
    decompose_transport_bundles,
    normalize_transport_tiers,
)

router = APIRouter(prefix="/pricing", tags=["pricing"])


class TransportRequest(BaseModel):
    """Vehicle count and tier table to price."""

    count: int = Field(
        ..., ge=0, le=MAX_TRANSPORT_COUNT, description="Vehicles shipped together"
    )
    tiers: dict[str, float] = Field(default_factory=dict, description="EUR per 1/2/4/8/9+ bundle")


class TransportResponse(BaseModel):
    """Transport bundles and costs."""

    count: int
    tiers: dict[str, float]
    bundles: list[int]
    total_eur: float
    per_car_eur: float


@router.post("/margin-breakdown", response_model=VehicleMarginBreakdown)
async def margin_breakdown(data: VehicleMarginInput) -> VehicleMarginBreakdown:
    """Cost-basis margin breakdown for one vehicle."""
    return calculate_vehicle_margin_breakdown(data)


@router.post("/transport", response_model=TransportResponse)
async def transport_cost(request: TransportRequest) -> TransportResponse:
    """Bundle decomposition and transport cost for a vehicle count."""
    tiers = normalize_transport_tiers(request.tiers)
    return TransportResponse(
        count=request.count,
        tiers={str(tier): price for tier, price in tiers.items()},
        bundles=decompose_transport_bundles(request.count, tiers),
        total_eur=calculate_transport_cost_total_eur(request.count, tiers),
        per_car_eur=calculate_transport_cost_per_car_eur(request.count, tiers),
    )
