"""
User account API endpoints: profile, password, saved properties and admin user management.
"""

from fastapi import APIRouter, Depends, status, Query, Path, Response
from typing import Optional
from uuid import UUID
import math

from homeswift.models.user import User
from homeswift.services.auth import AuthService
from homeswift.services.user import UserService
from homeswift.schemas.user import UserResponse, UserProfileUpdate, PasswordChangeRequest, UserListResponse
from homeswift.schemas.auth import MessageResponse
from homeswift.schemas.property import PropertyResponse, SavedPropertiesResponse
from homeswift.schemas.error import get_auth_error_responses, get_crud_error_responses, get_error_responses
from homeswift.utils.dependencies import (
    get_auth_service,
    get_user_service,
    get_current_active_user,
    get_current_admin_user
)
from homeswift.utils.exceptions import APIException, BadRequestError


router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/profile",
    response_model=UserResponse,
    summary="Get profile",
    responses=get_auth_error_responses()
)
async def get_profile(
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    user = await user_service.get_profile(current_user)
    return UserResponse.model_validate(user.to_dict())


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="Update profile",
    description="Update name, contact details, avatar and search preferences",
    responses=get_error_responses(400, 401, 422)
)
async def update_profile(
    profile_data: UserProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    try:
        user = await user_service.update_profile(current_user, profile_data)
        return UserResponse.model_validate(user.to_dict())
    except APIException:
        raise
    except Exception as e:
        raise BadRequestError(f"Failed to update profile: {str(e)}")


@router.put(
    "/password",
    response_model=MessageResponse,
    summary="Change password",
    responses=get_error_responses(401, 422)
)
async def change_password(
    password_data: PasswordChangeRequest,
    current_user: User = Depends(get_current_active_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    await auth_service.change_password(
        current_user,
        password_data.current_password,
        password_data.new_password
    )
    return MessageResponse(message="Password updated successfully")


@router.get(
    "/saved-properties",
    response_model=SavedPropertiesResponse,
    summary="Saved properties",
    responses=get_auth_error_responses()
)
async def get_saved_properties(
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service)
) -> SavedPropertiesResponse:
    properties = await user_service.get_saved_properties(current_user)
    return SavedPropertiesResponse(
        count=len(properties),
        data=[PropertyResponse.model_validate(prop.to_dict()) for prop in properties]
    )


@router.post(
    "/saved-properties/{property_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save property",
    description="Add a listing to the user's saved properties. Saving twice returns 200.",
    responses=get_error_responses(401, 404, 422)
)
async def save_property(
    response: Response,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service)
) -> MessageResponse:
    created = await user_service.save_property(current_user, property_id)
    if not created:
        response.status_code = status.HTTP_200_OK
        return MessageResponse(message="Property already saved")
    return MessageResponse(message="Property saved")


@router.delete(
    "/saved-properties/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unsave property",
    responses=get_error_responses(401, 404, 422)
)
async def unsave_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service)
) -> Response:
    await user_service.unsave_property(current_user, property_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/me",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete my account",
    description="Delete the signed-in account. Listings it owned are kept without an owner.",
    responses=get_auth_error_responses()
)
async def delete_me(
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service)
) -> Response:
    await user_service.delete_me(current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="Paginated user search. Requires admin role.",
    responses=get_auth_error_responses()
)
async def list_users(
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Users per page"),
    search: Optional[str] = Query(None, description="Match email, first or last name"),
    current_user: User = Depends(get_current_admin_user),
    user_service: UserService = Depends(get_user_service)
) -> UserListResponse:
    users, total = await user_service.list_users(current_user, page=page, page_size=page_size, search=search)

    return UserListResponse(
        count=len(users),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
        data=[UserResponse.model_validate(user.to_dict()) for user in users]
    )


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
    description="Delete another user's account. Requires admin role.",
    responses=get_crud_error_responses()
)
async def delete_user(
    user_id: UUID = Path(..., description="User ID"),
    current_user: User = Depends(get_current_admin_user),
    user_service: UserService = Depends(get_user_service)
) -> Response:
    await user_service.delete_user(current_user, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
