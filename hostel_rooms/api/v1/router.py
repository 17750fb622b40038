"""Aggregate router for API v1."""

from fastapi import APIRouter

from hostel_rooms.api.v1.endpoints import allocations, health, maintenance, rooms, students

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(rooms.router)
api_router.include_router(allocations.router)
api_router.include_router(students.router)
api_router.include_router(maintenance.router)
