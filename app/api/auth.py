"""
API key check for the parse endpoints.

Keys come from API_KEYS as "key:client" pairs. With no keys configured the
endpoints stay open and callers are reported as "anonymous".
"""

from typing import Dict, Optional

from fastapi import Depends, HTTPException
from fastapi.security import APIKeyHeader

from app.core.config import parse_comma_list, settings
from app.core.logger import Logger

logger = Logger("APIAuth")

ANONYMOUS_CLIENT = "anonymous"

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def load_client_keys(raw: Optional[str] = None) -> Dict[str, str]:
    """Map each configured key to its client name; entries without a client are skipped."""
    clients: Dict[str, str] = {}
    for entry in parse_comma_list(settings.API_KEYS if raw is None else raw):
        key, sep, client = entry.partition(":")
        if sep and key.strip() and client.strip():
            clients[key.strip()] = client.strip()
    return clients


async def require_client(api_key: Optional[str] = Depends(api_key_header)) -> str:
    """Resolve the calling client from X-API-Key; 401 when missing, 403 when unknown."""
    clients = load_client_keys()
    if not clients:
        return ANONYMOUS_CLIENT

    if not api_key:
        raise HTTPException(status_code=401, detail="Missing X-API-Key header")

    client = clients.get(api_key)
    if client is None:
        logger.warn(f"Rejected parse request with unknown key {api_key[:4]}***")
        raise HTTPException(status_code=403, detail="Unknown API key")
    return client
