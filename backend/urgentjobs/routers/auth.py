from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from urgentjobs.database import get_db
from urgentjobs.dependencies import Principal, get_current_user
from urgentjobs.models.user import User
from urgentjobs.schemas.auth import AuthResponse, LoginRequest, PasswordUpdate, RegisterRequest, UserSummary
from urgentjobs.schemas.common import Envelope, ok
from urgentjobs.services.auth_service import AuthService, auth_payload, user_summary

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Envelope[AuthResponse], status_code=201)
async def register(req: RegisterRequest, db: Session = Depends(get_db)):
    user = AuthService(db).register(req)
    return ok("User registered successfully", auth_payload(user))


@router.post("/login", response_model=Envelope[AuthResponse])
async def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = AuthService(db).login(req.email, req.password)
    return ok("Login successful", auth_payload(user))


@router.get("/me", response_model=Envelope[UserSummary])
async def me(principal: Principal = Depends(get_current_user), db: Session = Depends(get_db)):
    user = db.get(User, principal.id)
    return ok("User retrieved successfully", user_summary(user))


@router.put("/password", response_model=Envelope[AuthResponse])
async def update_password(
    req: PasswordUpdate,
    principal: Principal = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = AuthService(db).change_password(principal.id, req.current_password, req.new_password)
    return ok("Password updated successfully", auth_payload(user))
