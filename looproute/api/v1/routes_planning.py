# looproute/api/v1/routes_planning.py
from fastapi import APIRouter, HTTPException

from looproute.api.v1 import shared
from looproute.core.errors import InsufficientNodesError
from looproute.models.planning import PlanRequest, PlanResponse, RouteGeometry, RouteState
from looproute.services.orchestrator import PlanStatus

router = APIRouter(
    prefix="/plan",
    tags=["planning"],
)


@router.post(
    "/",
    response_model=PlanResponse,
    summary="Plan one closed driving route through all nodes",
)
async def plan_route(request: PlanRequest) -> PlanResponse:
    """
    Plan a loop through the current nodes, optionally reordering them with
    the external tour optimizer first.

    - 422 if there are fewer than 2 nodes.
    - 502 if the optimizer or the routing provider failed.
    - 409 if the nodes changed or a newer plan started meanwhile.
    """
    result = await shared.orchestrator.plan(optimize=request.optimize)

    if result.status == PlanStatus.FAILED:
        status_code = 422 if isinstance(result.error, InsufficientNodesError) else 502
        raise HTTPException(status_code=status_code, detail=result.message)
    if result.status == PlanStatus.DISCARDED:
        raise HTTPException(status_code=409, detail="Superseded by a newer plan or node edit")

    return PlanResponse(
        status=result.status.value,
        seq=result.seq,
        nodes=list(result.nodes),
        tour=result.tour,
        geometry=RouteGeometry.from_polyline(result.route),
    )


@router.get("/route", response_model=RouteState, summary="Route currently on the map")
async def current_route() -> RouteState:
    orchestrator = shared.orchestrator
    return RouteState(
        geometry=RouteGeometry.from_polyline(orchestrator.route),
        error=orchestrator.last_error,
    )


@router.delete("/route", response_model=RouteState, summary="Remove the route from the map")
async def clear_route() -> RouteState:
    shared.orchestrator.clear_route()
    return RouteState(geometry=RouteGeometry(coordinates=[]))
