"""Leaderboard API routes -- the /lb/<COMMAND>/... request surface.

  /lb/CREATE
  /lb/ADD/<private_key>/<name>/<score>[/<time>[/<notes>]]
  /lb/GET/<public_key>/json[/<limit>]
  /lb/DELETE/<private_key>/<record_id>
  /lb/CLEAR/<private_key>

Commands are case-insensitive. A name of NONAME submits an anonymous score.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from hiscore.domain.enums import ResultStatus


router = APIRouter(prefix="/lb", tags=["leaderboard"])

INVALID_REQUEST = "Invalid request"
COMMAND_NOT_FOUND = "Request type not recognized"
JSON_FORMAT = "json"

_HTTP_STATUS = {
    ResultStatus.OK: 200,
    ResultStatus.INVALID_INPUT: 400,
    ResultStatus.KEY_NOT_FOUND: 404,
    ResultStatus.RECORD_NOT_FOUND: 404,
    ResultStatus.STORAGE_ERROR: 500,
}


class RecordOut(BaseModel):
    record_id: int
    name: Optional[str] = None
    score: int
    time: int
    notes: Optional[str] = None
    submitted_at: datetime


class KeysOut(BaseModel):
    private_key: str
    public_key: str


_service = None


def init_routes(service):
    global _service
    _service = service


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _render(result) -> None:
    """Raise the HTTP error matching a failed OperationResult."""
    if not result.ok:
        raise HTTPException(status_code=_HTTP_STATUS[result.status], detail=result.message)


def _client_address(request: Request) -> str | None:
    return request.client.host if request.client else None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _create(parts: List[str], request: Request) -> dict:
    if parts:
        raise HTTPException(status_code=404, detail=COMMAND_NOT_FOUND)
    result = _service.create()
    _render(result)
    return {"leaderboard": KeysOut(**result.payload)}


def _add(parts: List[str], request: Request) -> dict:
    if len(parts) < 3:
        raise HTTPException(status_code=400, detail=INVALID_REQUEST)
    private_key, name, score = parts[0], parts[1], parts[2]
    time = parts[3] if len(parts) > 3 else 0
    # Notes are the tail of the path and may themselves contain slashes.
    notes = "/".join(parts[4:]) if len(parts) > 4 else None
    result = _service.submit(
        private_key,
        name,
        score,
        time=time,
        notes=notes,
        source_address=_client_address(request),
    )
    _render(result)
    return {"status": "OK"}


def _get(parts: List[str], request: Request) -> dict:
    if len(parts) < 2 or parts[1].lower() != JSON_FORMAT:
        raise HTTPException(status_code=400, detail=INVALID_REQUEST)
    limit = parts[2] if len(parts) > 2 else None
    result = _service.list_ranked(parts[0], limit)
    _render(result)
    entries = [RecordOut(**record.to_public_dict()) for record in result.payload]
    return {"leaderboard": {"entry": entries}}


def _delete(parts: List[str], request: Request) -> dict:
    if len(parts) < 2:
        raise HTTPException(status_code=400, detail=INVALID_REQUEST)
    result = _service.delete_one(parts[0], parts[1])
    _render(result)
    return {"status": "OK"}


def _clear(parts: List[str], request: Request) -> dict:
    if len(parts) < 1:
        raise HTTPException(status_code=400, detail=INVALID_REQUEST)
    result = _service.clear(parts[0])
    _render(result)
    return {"status": "OK", "removed": result.payload["removed"]}


_COMMANDS = {
    "CREATE": _create,
    "ADD": _add,
    "GET": _get,
    "DELETE": _delete,
    "CLEAR": _clear,
}


def _dispatch(command: str, args: str, request: Request) -> dict:
    handler = _COMMANDS.get(command.upper())
    if handler is None:
        raise HTTPException(status_code=404, detail=COMMAND_NOT_FOUND)
    parts = args.strip("/").split("/") if args.strip("/") else []
    return handler(parts, request)


@router.get("/{command}")
def api_command(command: str, request: Request):
    """Commands without arguments (CREATE)."""
    return _dispatch(command, "", request)


@router.get("/{command}/{args:path}")
def api_command_with_args(command: str, args: str, request: Request):
    """Commands addressed at one leaderboard."""
    return _dispatch(command, args, request)
