# ---------- routes/auth_routes.py ----------
"""
Auth routes backed by Supabase Auth.
Passwords never touch this service's storage; it checks input, applies the
registration cooldown and relays to Supabase.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from typing import Optional

from auth import bearer_token, get_current_user
from security import sanitize_input, validate_email, validate_password, rate_limiter
from supabase_client import (
    check_email_cooldown,
    delete_user_account,
    sign_in_user,
    sign_out_user,
    sign_up_user,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])

COOLDOWN_MESSAGE = (
    "This email address cannot be used for registration at this time. "
    "Please try again later or contact support."
)
LOGIN_ATTEMPTS = 5
LOGIN_WINDOW_SECONDS = 15 * 60


# ── Pydantic schemas ──────────────────────────────────────────────
class SignUpRequest(BaseModel):
    email: str
    password: str
    confirm_password: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class DeleteAccountRequest(BaseModel):
    confirm: str


def _session_payload(response) -> dict:
    user = getattr(response, "user", None)
    session = getattr(response, "session", None)
    return {
        "user": {"id": user.id, "email": user.email} if user else None,
        "access_token": session.access_token if session else None,
        "refresh_token": session.refresh_token if session else None,
        "expires_in": session.expires_in if session else None,
    }


# ── Routes ────────────────────────────────────────────────────────
@router.post("/signup")
async def signup(body: SignUpRequest):
    email = sanitize_input(body.email).lower()
    if not validate_email(email):
        raise HTTPException(status_code=400, detail="Please enter a valid email address")

    password_errors = validate_password(body.password)
    if password_errors:
        raise HTTPException(status_code=400, detail=password_errors[0])

    if body.confirm_password is not None and body.confirm_password != body.password:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    if check_email_cooldown(email):
        raise HTTPException(status_code=403, detail=COOLDOWN_MESSAGE)

    try:
        response = await sign_up_user(email, body.password)
        return {
            "status": "success",
            "message": "Please check your email to confirm your account.",
            "data": _session_payload(response),
        }
    except Exception as e:
        logger.error(f"Sign-up failed for {email}: {e}")
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/login")
async def login(body: LoginRequest, request: Request):
    email = sanitize_input(body.email).lower()
    client_ip = request.client.host if request.client else "unknown"
    if not rate_limiter.is_allowed(f"login:{client_ip}", LOGIN_ATTEMPTS, LOGIN_WINDOW_SECONDS):
        raise HTTPException(status_code=429, detail="Too many login attempts. Please try again later.")

    try:
        response = await sign_in_user(email, body.password)
    except Exception as e:
        logger.warning(f"Login failed for {email}: {e}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    rate_limiter.reset(f"login:{client_ip}")
    return {"status": "success", "data": _session_payload(response)}


@router.post("/logout")
async def logout(request: Request, user_id: str = Depends(get_current_user)):
    try:
        await sign_out_user(bearer_token(request))
        return {"status": "success"}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/me")
async def me(user_id: str = Depends(get_current_user)):
    return {"status": "success", "data": {"id": user_id}}


@router.delete("/account")
async def delete_account(body: DeleteAccountRequest, request: Request,
                         user_id: str = Depends(get_current_user)):
    if body.confirm != "DELETE":
        raise HTTPException(status_code=400, detail="Please type DELETE to confirm")

    outcome = await delete_user_account(bearer_token(request))
    if not outcome["success"]:
        raise HTTPException(status_code=500, detail=outcome["message"])
    return {"status": "success", "data": outcome}
