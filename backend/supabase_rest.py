"""
supabase_rest.py - HTTP-based database client using Supabase's PostgREST API.
Table CRUD runs with the service key; RPCs run with the caller's access token
so row-level security and auth.uid() apply on the backend side.
"""
import httpx
from urllib.parse import quote

from config import SUPABASE_URL, SUPABASE_ANON_KEY, SUPABASE_SERVICE_ROLE_KEY, REQUEST_TIMEOUT


def _headers(token: str = None, prefer: str = "return=representation"):
    # No token: service role. With a token: anon key plus that bearer.
    key = SUPABASE_SERVICE_ROLE_KEY if token is None else SUPABASE_ANON_KEY
    return {
        "apikey": key,
        "Authorization": f"Bearer {token or SUPABASE_SERVICE_ROLE_KEY}",
        "Content-Type": "application/json",
        "Prefer": prefer,
    }


def _eq_filters(filters: dict = None) -> str:
    if not filters:
        return ""
    return "".join(f"&{key}=eq.{quote(str(value))}" for key, value in filters.items())


def sb_select(table: str, filters: dict = None, columns: str = "*", order: str = None) -> list:
    """Select rows from a table with optional equality filters and ordering."""
    url = f"{SUPABASE_URL}/rest/v1/{table}?select={columns}" + _eq_filters(filters)
    if order:
        # "week_number" or "created_at.desc"
        url += f"&order={order if '.' in order else order + '.asc'}"

    with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
        resp = client.get(url, headers=_headers())
        resp.raise_for_status()
        return resp.json()


def sb_insert(table: str, data: dict) -> dict:
    """Insert a row and return the created record."""
    url = f"{SUPABASE_URL}/rest/v1/{table}"
    with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
        resp = client.post(url, json=data, headers=_headers())
        resp.raise_for_status()
        result = resp.json()
        return result[0] if isinstance(result, list) and result else {}


def sb_upsert(table: str, data: dict, on_conflict: str) -> dict:
    """Insert or merge a row on the given unique columns (comma-separated)."""
    url = f"{SUPABASE_URL}/rest/v1/{table}?on_conflict={on_conflict}"
    headers = _headers(prefer="resolution=merge-duplicates,return=representation")
    with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
        resp = client.post(url, json=data, headers=headers)
        resp.raise_for_status()
        result = resp.json()
        return result[0] if isinstance(result, list) and result else {}


def sb_update(table: str, filters: dict, data: dict) -> list:
    """Patch every row matching the equality filters."""
    url = f"{SUPABASE_URL}/rest/v1/{table}?" + _eq_filters(filters).lstrip("&")
    with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
        resp = client.patch(url, json=data, headers=_headers())
        resp.raise_for_status()
        result = resp.json()
        return result if isinstance(result, list) else []


def sb_delete(table: str, filters: dict) -> None:
    """Delete rows matching the equality filters."""
    if not filters:
        # PostgREST refuses unfiltered deletes anyway
        raise ValueError("Refusing to delete without filters")
    url = f"{SUPABASE_URL}/rest/v1/{table}?" + _eq_filters(filters).lstrip("&")
    with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
        resp = client.delete(url, headers=_headers())
        resp.raise_for_status()


def sb_rpc(function: str, params: dict = None, access_token: str = None):
    """Call a database function and return its decoded JSON result."""
    url = f"{SUPABASE_URL}/rest/v1/rpc/{function}"
    headers = _headers(token=access_token or SUPABASE_ANON_KEY)
    with httpx.Client(timeout=REQUEST_TIMEOUT) as client:
        resp = client.post(url, json=params or {}, headers=headers)
        resp.raise_for_status()
        return resp.json()
