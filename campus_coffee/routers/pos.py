"""POS API Routes"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_coffee.clients.osm_client import OsmClient
from campus_coffee.config import Settings, get_settings
from campus_coffee.database import get_db
from campus_coffee.schemas.pos import Pos, PosDraft
from campus_coffee.services.pos_service import PosService
from campus_coffee.services.pos_store import PosStore

router = APIRouter()


def get_pos_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> PosService:
    """Service bound to the request's database session"""
    return PosService(PosStore(db), OsmClient.from_settings(settings))


@router.get("", response_model=list[Pos])
async def list_pos(service: PosService = Depends(get_pos_service)):
    """List all POS"""
    return await service.get_all()


@router.get("/{pos_id}", response_model=Pos)
async def get_pos(pos_id: int, service: PosService = Depends(get_pos_service)):
    """Get a POS by ID"""
    return await service.get_by_id(pos_id)


@router.post("", response_model=Pos, status_code=status.HTTP_201_CREATED)
async def create_pos(pos: PosDraft, service: PosService = Depends(get_pos_service)):
    """Create a new POS"""
    if pos.id is not None:
        raise HTTPException(status_code=400, detail="POS ID must not be set when creating a POS")
    return await service.upsert(pos)


@router.put("/{pos_id}", response_model=Pos)
async def update_pos(pos_id: int, pos: PosDraft, service: PosService = Depends(get_pos_service)):
    """Update an existing POS"""
    if pos.id is not None and pos.id != pos_id:
        raise HTTPException(
            status_code=400,
            detail=f"POS ID in path ({pos_id}) does not match ID in body ({pos.id})"
        )
    return await service.upsert(pos.model_copy(update={"id": pos_id}))


@router.post("/import/osm/{node_id}", response_model=Pos, status_code=status.HTTP_201_CREATED)
async def import_pos_from_osm(node_id: int, service: PosService = Depends(get_pos_service)):
    """Import a POS from an OpenStreetMap node"""
    return await service.import_from_osm_node(node_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_pos(service: PosService = Depends(get_pos_service)):
    """Delete all POS"""
    await service.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
