# services/supabase_client.py
from supabase import create_client, Client
from config import Settings

def _error_msg(settings: Settings) -> str:
    missing = []
    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")
    return "Supabase not configured. Set " + ", ".join(missing) + " env vars."

def build_client(settings: Settings) -> Client:
    """Return a Supabase client for the local store. Raises with a clear message if misconfigured."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError(_error_msg(settings))
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
