from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from app.api.auth import require_client
from app.services.response_parser import response_parser_service
from app.core.logger import Logger

router = APIRouter(prefix="/api", tags=["API"])
logger = Logger("ParseAPI")

MAX_BATCH_SIZE = 50


# Request Models
class ParseRequest(BaseModel):
    text: Optional[str] = None


class BatchParseRequest(BaseModel):
    texts: List[Optional[str]] = Field(default_factory=list, max_length=MAX_BATCH_SIZE)


# Health
@router.get("/health")
async def api_health():
    return {
        "status": "ok",
        "cache": response_parser_service.get_stats(),
    }


# Parse Endpoints
@router.post("/parse")
async def parse(req: ParseRequest, client: str = Depends(require_client)) -> Dict[str, Any]:
    return response_parser_service.parse_to_dict(req.text)


@router.post("/parse/batch")
async def parse_batch(req: BatchParseRequest, client: str = Depends(require_client)):
    results = [response_parser_service.parse_to_dict(text) for text in req.texts]
    logger.debug(f"Parsed batch of {len(results)} for {client}")
    return {"results": results}
