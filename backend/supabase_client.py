# supabase_client.py - Supabase Auth clients and account RPCs

import logging

from supabase import create_client, Client

from config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_ANON_KEY
from supabase_rest import sb_rpc

logger = logging.getLogger(__name__)

# Global Supabase client instances
_supabase_admin: Client = None
_supabase_client: Client = None


def get_supabase_admin() -> Client:
    """
    Get Supabase client with service role key (admin privileges).
    Used to revoke a user's sessions after account deletion.
    """
    global _supabase_admin

    if _supabase_admin is None:
        if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in environment variables")

        _supabase_admin = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)

    return _supabase_admin


def get_supabase_client() -> Client:
    """
    Get Supabase client with anonymous key (limited permissions).
    Sign-up, sign-in and sign-out go through this one.
    """
    global _supabase_client

    if _supabase_client is None:
        if not SUPABASE_URL or not SUPABASE_ANON_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set in environment variables")

        _supabase_client = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)

    return _supabase_client


# Authentication helpers
async def sign_up_user(email: str, password: str, metadata: dict = None):
    """Register a new user with Supabase Auth."""
    supabase = get_supabase_client()
    return supabase.auth.sign_up({
        "email": email,
        "password": password,
        "options": {
            "data": metadata or {}
        }
    })


async def sign_in_user(email: str, password: str):
    """Sign in a user with Supabase Auth."""
    supabase = get_supabase_client()
    return supabase.auth.sign_in_with_password({
        "email": email,
        "password": password
    })


async def sign_out_user(access_token: str):
    """Revoke every session of the token's user."""
    supabase = get_supabase_admin()
    return supabase.auth.admin.sign_out(access_token, "global")


# Database functions (implemented server-side, called over PostgREST)
def check_email_cooldown(email: str) -> bool:
    """
    True only when the backend answers exactly `true`. Any error means the
    email is treated as available so sign-up is not blocked by an outage.
    """
    try:
        return sb_rpc("is_email_in_cooldown", {"check_email": email}) is True
    except Exception as e:
        logger.warning(f"Email cooldown check failed: {e}")
        return False


async def delete_user_account(access_token: str) -> dict:
    """
    Delete the caller's account and data via the delete_user_account function,
    then sign the user out everywhere (also when deletion failed).
    """
    try:
        outcome = sb_rpc("delete_user_account", access_token=access_token)
    except Exception as e:
        logger.error(f"RPC deletion error: {e}")
        await _force_sign_out(access_token)
        return {"success": False, "message": f"Account deletion failed: {e}", "deleted_user_id": None}

    if not isinstance(outcome, dict) or not outcome.get("success"):
        logger.error(f"Database deletion failed: {outcome}")
        await _force_sign_out(access_token)
        message = outcome.get("error") if isinstance(outcome, dict) else None
        return {"success": False, "message": message or "Account deletion failed", "deleted_user_id": None}

    await _force_sign_out(access_token)
    logger.info(f"Account deletion successful: {outcome.get('user_id')}")
    return {
        "success": True,
        "message": outcome.get("message") or "Account deleted successfully",
        "deleted_user_id": outcome.get("user_id"),
    }


async def _force_sign_out(access_token: str):
    try:
        await sign_out_user(access_token)
    except Exception as e:
        logger.warning(f"Global sign-out failed: {e}")
