import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from traveladvisor.core.budget import estimate_budget
from traveladvisor.core.clerk_security import get_current_identity
from traveladvisor.core.json_repair import JSONExtractionError, extract_json, has_required_keys
from traveladvisor.core.llm_provider import TextGenerator, get_text_generator
from traveladvisor.core.maps import attach_maps_links
from traveladvisor.core.prompts import build_plan_prompt, build_suggest_prompt
from traveladvisor.core.repository import MongoDBRepo, get_optional_repo
from traveladvisor.core.schemas import Identity, SuggestRequest, TripRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])

PLAN_KEYS = ("roadmap", "accommodations", "attractions")
SUGGEST_KEYS = ("suggestions",)


async def _generate_json(
    generator: TextGenerator, prompt: str, required: tuple[str, ...], tag: str
) -> dict[str, Any]:
    """
    Run one generation and recover a JSON object from the output.

    Raises:
        HTTPException 500: the provider call failed
        HTTPException 502: the output held no JSON object with the required keys
    """
    try:
        text = await generator.generate_async(prompt)
    except Exception as e:
        logger.error(f"[{tag}] Generation failed with {generator.name}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail={"error": "Generation failed", "details": str(e)},
        )

    try:
        parsed = extract_json(text)
    except JSONExtractionError:
        parsed = None

    if not has_required_keys(parsed, required):
        logger.error(f"[{tag}] AI returned invalid JSON ({len(text)} chars)")
        raise HTTPException(
            status_code=502,
            detail={"error": "AI returned invalid JSON", "raw": text},
        )
    return parsed


async def _save_trip(
    repo: MongoDBRepo | None,
    user_id: str,
    trip_type: str,
    input_data: dict,
    result: dict,
    tag: str,
) -> str | None:
    """Persist a TripRecord. A failed write is logged and never fails the request."""
    if repo is None:
        logger.error(f"[{tag}] No database available, {trip_type} for {user_id} not saved")
        return None
    try:
        return await asyncio.to_thread(repo.add_trip, user_id, trip_type, input_data, result)
    except Exception:
        logger.error(f"[{tag}] Could not save {trip_type} for {user_id}", exc_info=True)
        return None


@router.post("/plan")
async def generate_plan(
    request: TripRequest,
    identity: Identity = Depends(get_current_identity),
    generator: TextGenerator = Depends(get_text_generator),
    repo: MongoDBRepo | None = Depends(get_optional_repo),
) -> dict[str, Any]:
    """
    Generate a day-by-day trip plan.

    When no budget is supplied one is estimated from the style, accommodation
    and transport choices and returned as calculatedBudget.
    """
    breakdown = estimate_budget(
        request.days,
        request.travelers,
        request.travel_style,
        request.accommodation_type,
        request.transportation_type,
        fuel_cost_per_liter=request.fuel_cost_per_liter,
        vehicle_mileage=request.vehicle_mileage,
    )
    calculated_budget = breakdown.total if request.budget is None else None
    budget = request.budget if request.budget is not None else breakdown.total

    logger.info(
        f"[Plan] {request.days} days, {request.travelers} travelers, "
        f"{', '.join(request.places)} (budget {budget})"
    )
    plan = await _generate_json(generator, build_plan_prompt(request, budget), PLAN_KEYS, "Plan")
    attach_maps_links(plan, request.places)

    input_data = request.model_dump(mode="json", by_alias=True)
    input_data["budget"] = budget
    input_data["budgetBreakdown"] = breakdown.model_dump(by_alias=True)
    trip_id = await _save_trip(repo, identity.user_id, "plan", input_data, plan, "Plan")

    return {
        "id": trip_id,
        "saved": trip_id is not None,
        "plan": plan,
        "calculatedBudget": calculated_budget,
        "budgetBreakdown": breakdown.model_dump(by_alias=True),
    }


@router.post("/suggest")
async def suggest_destinations(
    request: SuggestRequest,
    identity: Identity = Depends(get_current_identity),
    generator: TextGenerator = Depends(get_text_generator),
    repo: MongoDBRepo | None = Depends(get_optional_repo),
) -> dict[str, Any]:
    """Suggest destinations that fit a total budget."""
    logger.info(f"[Suggest] budget {request.budget_inr}, {request.days} days")
    result = await _generate_json(
        generator, build_suggest_prompt(request), SUGGEST_KEYS, "Suggest"
    )

    input_data = request.model_dump(mode="json", by_alias=True)
    trip_id = await _save_trip(
        repo, identity.user_id, "suggest", input_data, result, "Suggest"
    )

    return {
        "id": trip_id,
        "saved": trip_id is not None,
        "suggestions": result["suggestions"],
    }
