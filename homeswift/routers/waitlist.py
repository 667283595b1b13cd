"""
Waitlist endpoints for the pre-launch signup form.
"""

from fastapi import APIRouter, Depends, Response, status

from homeswift.models.user import User
from homeswift.services.waitlist import WaitlistService
from homeswift.schemas.waitlist import (
    WaitlistJoinRequest,
    WaitlistJoinResponse,
    WaitlistEntryResponse,
    WaitlistListResponse
)
from homeswift.schemas.error import get_auth_error_responses, get_error_responses
from homeswift.utils.dependencies import get_waitlist_service, get_current_admin_user


router = APIRouter(prefix="/waitlist", tags=["Waitlist"])


@router.post(
    "",
    response_model=WaitlistJoinResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Join the waitlist",
    description="Returns 201 for a new email and 200 when the email is already on the list",
    responses=get_error_responses(422)
)
async def join_waitlist(
    join_data: WaitlistJoinRequest,
    response: Response,
    waitlist_service: WaitlistService = Depends(get_waitlist_service)
) -> WaitlistJoinResponse:
    entry, created = await waitlist_service.join(join_data.email, join_data.name)

    if not created:
        response.status_code = status.HTTP_200_OK
        return WaitlistJoinResponse(message="You are already on the waitlist!")

    return WaitlistJoinResponse(
        message="Successfully joined the waitlist!",
        data=WaitlistEntryResponse.model_validate(entry)
    )


@router.get(
    "",
    response_model=WaitlistListResponse,
    summary="List waitlist entries",
    description="Newest first. Requires admin role.",
    responses=get_auth_error_responses()
)
async def list_waitlist(
    current_user: User = Depends(get_current_admin_user),
    waitlist_service: WaitlistService = Depends(get_waitlist_service)
) -> WaitlistListResponse:
    entries = await waitlist_service.list_entries()
    return WaitlistListResponse(data=[WaitlistEntryResponse.model_validate(entry) for entry in entries])
