from fastapi import APIRouter, Depends, Request, status
from typing import List
from apps.parts.schemas import (
    MessageResponse,
    PartDetailResponse,
    PartPayload,
    PartResponse,
)
from apps.parts.services import PartService, get_part_service
from core.exceptions import InvalidInput
import logging
import re

logger = logging.getLogger(__name__)

PART_ID_PATTERN = re.compile(r"\d+", re.ASCII)


def log_request(request: Request):
    logger.info(f"{request.method} {request.url.path}")


router = APIRouter(dependencies=[Depends(log_request)])


def valid_part_id(part_id: str) -> str:
    """Reject malformed identifiers before a database session is ever opened"""
    if not PART_ID_PATTERN.fullmatch(part_id):
        raise InvalidInput("Invalid part ID format.")
    # Kept as typed so messages echo the path segment
    return part_id


@router.get(
    "",
    response_model=List[PartDetailResponse],
    summary="Get all parts",
    description="Retrieve every part, newest first"
)
def list_parts(service: PartService = Depends(get_part_service)):
    return service.list_parts()


@router.get(
    "/{part_id}",
    response_model=PartDetailResponse,
    summary="Get part by ID",
    responses={400: {"model": MessageResponse}, 404: {"model": MessageResponse}}
)
def get_part(
    part_id: str = Depends(valid_part_id),
    service: PartService = Depends(get_part_service)
):
    return service.get_part(part_id)


@router.post(
    "",
    response_model=PartResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new part",
    responses={400: {"model": MessageResponse}}
)
def create_part(
    part: PartPayload,
    service: PartService = Depends(get_part_service)
):
    return service.create_part(part)


@router.put(
    "/{part_id}",
    response_model=PartResponse,
    summary="Update part",
    description="Replace every mutable field of an existing part",
    responses={400: {"model": MessageResponse}, 404: {"model": MessageResponse}}
)
def update_part(
    part: PartPayload,
    part_id: str = Depends(valid_part_id),
    service: PartService = Depends(get_part_service)
):
    return service.update_part(part_id, part)


@router.delete(
    "/{part_id}",
    response_model=MessageResponse,
    summary="Delete part",
    responses={400: {"model": MessageResponse}, 404: {"model": MessageResponse}}
)
def delete_part(
    part_id: str = Depends(valid_part_id),
    service: PartService = Depends(get_part_service)
):
    return {"message": service.delete_part(part_id)}
