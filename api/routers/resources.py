"""Practice resource API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, Response

from database.db_manager import DatabaseManager
from api.dependencies import ensure_owned, get_current_user, get_db
from api.schemas import CreateResourceRequest, UpdateResourceRequest
from models import Resource, User

router = APIRouter()


@router.get("", response_model=List[Resource])
async def get_resources(
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return await db.resources.get_resources(user.id)


@router.post("", response_model=Resource, status_code=201)
async def create_resource(
    req: CreateResourceRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    return await db.resources.create_resource(user.id, req.model_dump())


@router.patch("/{resource_id}", response_model=Resource)
async def update_resource(
    resource_id: int,
    req: UpdateResourceRequest,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    ensure_owned(await db.resources.get_resource(resource_id), user, "Resource", resource_id)
    return await db.resources.update_resource(resource_id, **req.model_dump(exclude_unset=True))


@router.delete("/{resource_id}", status_code=204)
async def delete_resource(
    resource_id: int,
    user: User = Depends(get_current_user),
    db: DatabaseManager = Depends(get_db),
):
    """Delete a resource. Deleting one that is already gone still returns 204."""
    resource = await db.resources.get_resource(resource_id)
    if resource is not None and resource.user_id == user.id:
        await db.resources.delete_resource(resource_id)
    return Response(status_code=204)
