# looproute/api/v1/routes_nodes.py
from fastapi import APIRouter, HTTPException

from looproute.api.v1 import shared
from looproute.models.planning import NodeCreate, NodeList, NodeMove

router = APIRouter(
    prefix="/nodes",
    tags=["nodes"],
)


def _node_list() -> NodeList:
    orchestrator = shared.orchestrator
    return NodeList(nodes=list(orchestrator.nodes), revision=orchestrator.revision)


@router.get("/", response_model=NodeList, summary="List the current nodes")
async def list_nodes() -> NodeList:
    return _node_list()


@router.post("/", response_model=NodeList, summary="Append a node")
async def add_node(body: NodeCreate) -> NodeList:
    """
    Append a node at the end of the list.

    With `label=true` and no explicit name, the node is named by reverse
    geocoding; a failed lookup leaves it unnamed.
    """
    orchestrator = shared.orchestrator
    index = orchestrator.add_node(lat=body.lat, lng=body.lng, name=body.name)
    if body.label and body.name is None:
        await orchestrator.label_node(index)
    return _node_list()


@router.delete("/last", response_model=NodeList, summary="Remove the last node")
async def remove_last_node() -> NodeList:
    shared.orchestrator.remove_last()
    return _node_list()


@router.delete("/{index}", response_model=NodeList, summary="Remove the node at a position")
async def remove_node(index: int) -> NodeList:
    try:
        shared.orchestrator.remove_node(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _node_list()


@router.post("/move", response_model=NodeList, summary="Reorder a node")
async def move_node(body: NodeMove) -> NodeList:
    try:
        shared.orchestrator.move_node(body.src, body.dst)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _node_list()


@router.delete("/", response_model=NodeList, summary="Remove all nodes")
async def clear_nodes() -> NodeList:
    shared.control.on_clear()
    return _node_list()
