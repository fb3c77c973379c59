from fastapi import APIRouter, Depends, HTTPException, Response, Cookie
from app.core.config import settings
from app.core.dependencies import authenticate_user, get_current_user, get_store
from app.core.errors import Unauthorized
from app.core.jwt_config import create_access_token, create_refresh_token, decode_token, user_claims
from app.schemas.user import CurrentUser, PasswordChange, UserCreate, UserLogin, UserOut
from app.services.user_service import change_password, create_user, get_all_users, get_user_by_email
from app.store.base import RowStore

router = APIRouter()

def _set_auth_cookies(response: Response, user):
    claims = user_claims(user)

    response.set_cookie(
        key="access_token",
        value=create_access_token(claims),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_MINUTES * 60,
    )

    response.set_cookie(
        key="refresh_token",
        value=create_refresh_token({"sub": user.email}),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.REFRESH_TOKEN_DAYS * 24 * 3600,
    )

@router.get("/", response_model=list[UserOut])
async def get_all(store: RowStore = Depends(get_store), current_user: CurrentUser = Depends(get_current_user)):
    return await get_all_users(store, current_user.company_name)

@router.post("/signup", response_model=UserOut)
async def register_user(data: UserCreate, store: RowStore = Depends(get_store)):
    try:
        user = await create_user(store, data)
        return user
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/login", response_model=UserOut)
async def login_user(data: UserLogin, response: Response, store: RowStore = Depends(get_store)):
    user = await authenticate_user(store, data.email, data.password)
    _set_auth_cookies(response, user)
    return user

@router.get("/me", response_model=UserOut)
async def read_users_me(current_user: CurrentUser = Depends(get_current_user)):
    return current_user

@router.post("/refresh", response_model=UserOut)
async def refresh_token(
    response: Response,
    store: RowStore = Depends(get_store),
    refresh_cookie: str | None = Cookie(None, alias="refresh_token")
):
    if refresh_cookie is None:
        raise Unauthorized("Refresh token missing")

    payload = decode_token(refresh_cookie)
    if payload.get("type") != "refresh":
        raise Unauthorized("Invalid refresh token")

    user = await get_user_by_email(store, payload.get("sub") or "")

    if not user or not user.is_active:
        raise Unauthorized("User not found")

    _set_auth_cookies(response, user)
    return user

@router.post("/logout")
async def logout_user(response: Response):
    response.delete_cookie("access_token")
    response.delete_cookie("refresh_token")
    return {"message": "Logged out"}

@router.post("/change-password")
async def change_user_password(
    data: PasswordChange,
    response: Response,
    store: RowStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    user = await change_password(store, current_user.email, data.current_password, data.new_password)
    _set_auth_cookies(response, user)
    return {"message": "Password changed"}
