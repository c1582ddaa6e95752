from functools import lru_cache

from supabase import ClientOptions, create_client, Client

from jobboard import settings


def _require_settings():
  if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
    raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set")


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
  """Return the process-wide Supabase client built from SUPABASE_URL/SUPABASE_KEY."""
  _require_settings()
  return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


@lru_cache(maxsize=1)
def get_auth_client() -> Client:
  """Return the client used for candidate sign-in/sign-up/sign-out.

  It keeps no session of its own, so signing a candidate in never changes
  the credentials used by database and storage requests.
  """
  _require_settings()
  return create_client(
    settings.SUPABASE_URL,
    settings.SUPABASE_KEY,
    options=ClientOptions(persist_session=False, auto_refresh_token=False)
  )
