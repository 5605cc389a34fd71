# looproute/api/v1/routes_search.py
from typing import List

from fastapi import APIRouter, HTTPException, Query

from looproute.api.v1 import shared
from looproute.core.errors import GeocodingError
from looproute.models.planning import NodeList, PlaceCandidate

router = APIRouter(
    prefix="/search",
    tags=["search"],
)


@router.get("/", response_model=List[PlaceCandidate], summary="Search places by text")
async def search_places(q: str = Query("", description="Free-text address or place")) -> List[PlaceCandidate]:
    try:
        return await shared.control.on_search(q)
    except GeocodingError as e:
        raise HTTPException(status_code=502, detail=e.message)


@router.post("/select", response_model=NodeList, summary="Add a search result as a node")
async def select_place(candidate: PlaceCandidate) -> NodeList:
    shared.control.on_select(candidate)
    orchestrator = shared.orchestrator
    return NodeList(nodes=list(orchestrator.nodes), revision=orchestrator.revision)
