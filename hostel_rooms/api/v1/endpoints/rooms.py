"""
Room endpoints: listings, beds, room management and occupancy repair.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from hostel_rooms.api.deps import get_current_principal, get_occupancy_service, get_room_service
from hostel_rooms.schemas.common.enums import RoomType
from hostel_rooms.schemas.room import (
    BedResponse,
    OccupancyReport,
    RoomCreate,
    RoomResponse,
    RoomUpdate,
)
from hostel_rooms.services.common.permissions import Principal
from hostel_rooms.services.room import OccupancyService, RoomService

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    available: Optional[bool] = Query(None, description="Only rooms that can (or cannot) take an allocation"),
    room_type: Optional[RoomType] = Query(None),
    floor: Optional[int] = Query(None, ge=0),
    principal: Principal = Depends(get_current_principal),
    rooms: RoomService = Depends(get_room_service),
):
    return rooms.list_rooms(available=available, room_type=room_type, floor=floor)


@router.get("/available", response_model=List[RoomResponse])
def list_available_rooms(
    principal: Principal = Depends(get_current_principal),
    rooms: RoomService = Depends(get_room_service),
):
    return rooms.list_available_rooms()


@router.post("/recompute-occupancy", response_model=List[OccupancyReport])
def recompute_all_rooms(
    principal: Principal = Depends(get_current_principal),
    occupancy: OccupancyService = Depends(get_occupancy_service),
):
    return occupancy.recompute_all(actor=principal)


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    principal: Principal = Depends(get_current_principal),
    rooms: RoomService = Depends(get_room_service),
):
    return rooms.create_room(payload, actor=principal)


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: str,
    principal: Principal = Depends(get_current_principal),
    rooms: RoomService = Depends(get_room_service),
):
    return rooms.get_room(room_id)


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: str,
    payload: RoomUpdate,
    principal: Principal = Depends(get_current_principal),
    rooms: RoomService = Depends(get_room_service),
):
    return rooms.update_room(room_id, payload, actor=principal)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(
    room_id: str,
    principal: Principal = Depends(get_current_principal),
    rooms: RoomService = Depends(get_room_service),
):
    rooms.delete_room(room_id, actor=principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{room_id}/beds", response_model=List[BedResponse])
def list_beds(
    room_id: str,
    only_free: bool = Query(False),
    principal: Principal = Depends(get_current_principal),
    rooms: RoomService = Depends(get_room_service),
):
    return rooms.list_beds_in_room(room_id, only_free=only_free)


@router.post("/{room_id}/recompute-occupancy", response_model=OccupancyReport)
def recompute_room(
    room_id: str,
    principal: Principal = Depends(get_current_principal),
    occupancy: OccupancyService = Depends(get_occupancy_service),
):
    return occupancy.recompute_occupancy(room_id, actor=principal)
