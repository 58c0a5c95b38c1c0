from fastapi import APIRouter, Depends

from src.data.models.db_entity.user import User
from src.data.postgres.user_ops import DuplicateEmailError
from src.storefront.dependencies import get_current_account, get_current_user
from src.storefront.schemas import LoginRequest, LoginResponse, ProfileUpdate, RegisterRequest, UserInfo
from src.storefront.services import auth_service
from src.storefront.services.session_store import SessionStore, get_session_store
from src.utils.response_format import ResponseFormat
from src.utils.status import Status

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register")
async def register(request: RegisterRequest):
    """Create a USER account. Admin accounts are granted from the admin panel."""
    try:
        user = await auth_service.register_user(
            username=request.username,
            email=str(request.email),
            password=request.password,
            address=request.address,
            contact=request.contact,
        )
    except DuplicateEmailError as e:
        return ResponseFormat(status=Status.CONFLICT, message=str(e)).to_response(409)
    except ValueError as e:
        return ResponseFormat(status=Status.INVALID_PARAMS, message=str(e)).to_response(400)

    return ResponseFormat(
        message="Registration successful! Please log in.",
        data=user.to_dict()
    ).to_response(201)


@router.post("/login")
async def login(request: LoginRequest, store: SessionStore = Depends(get_session_store)):
    """Authenticate user and return a JWT bound to a fresh shop session."""
    result = await auth_service.authenticate_user(request.username, request.password, store)

    if not result:
        return ResponseFormat(
            status=Status.UNAUTHORIZED,
            message="Invalid username or password",
        ).to_response(401)

    return ResponseFormat(
        message="Login successful",
        data=LoginResponse(**result).model_dump()
    ).to_response()


@router.post("/logout")
async def logout(
    current_user: UserInfo = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
):
    """Destroy the shop session; the token stops working for cart and orders."""
    await auth_service.logout(current_user.session_id, store)
    return ResponseFormat(message="Logged out").to_response()


@router.get("/me")
async def me(user: User = Depends(get_current_account)):
    return ResponseFormat(data=user.to_dict()).to_response()


@router.put("/profile")
async def update_profile(request: ProfileUpdate, user: User = Depends(get_current_account)):
    """Edit the caller's own username, email, password, address or contact."""
    try:
        updated = await auth_service.update_profile(user.id, request.model_dump(exclude_none=True))
    except DuplicateEmailError as e:
        return ResponseFormat(status=Status.CONFLICT, message=str(e)).to_response(409)
    except ValueError as e:
        return ResponseFormat(status=Status.INVALID_PARAMS, message=str(e)).to_response(400)

    return ResponseFormat(message="Profile updated", data=updated.to_dict()).to_response()
