from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from gmpanel.audit import Module
from gmpanel.controller.base import BaseController, get_controller
from gmpanel.core.security import (
    create_access_token,
    get_current_user,
    set_identity,
    verify_password,
)
from gmpanel.db.session import get_db
from gmpanel.models.user import User
from gmpanel.schemas.auth import LoginRequest
from gmpanel.schemas.token import TokenResponse
from gmpanel.schemas.user import UserDeviceOut, UserOut
from gmpanel.services.devices import capture_device


class AuthController(BaseController):
    module = Module("auth", "Authorization")
    action_descriptions = {
        "login": "sign in",
        "me": "view own account",
    }


router = AuthController.router()


def _build_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        username=user.username,
        call_name=user.profile.call_name if user.profile else None,
        roles=[role.name for role in user.roles],
        device=UserDeviceOut.model_validate(user.device) if user.device else None,
    )


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    controller: BaseController = Depends(get_controller),
) -> TokenResponse:
    user = db.query(User).filter(User.username == payload.username).first()
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
        )

    capture_device(
        db,
        user,
        user_agent=request.headers.get("user-agent"),
        ipaddress=request.client.host if request.client else None,
    )
    db.commit()
    db.refresh(user)

    set_identity(request, user)
    controller.use_data_model(user)
    return TokenResponse(access_token=create_access_token({"sub": str(user.id)}))


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)) -> UserOut:
    return _build_user_out(user)
