"""
NoteCache — Write Route Handler
================================

What:  Handles POST /write, the only way to create a note.
How:   Reads the `note_name` and `note` fields and delegates to
       NoteStore.create().

Accepted bodies:
    multipart/form-data                  (HTML form with enctype="multipart/form-data")
    application/x-www-form-urlencoded    (plain HTML form)
    application/json                     {"note_name": "...", "note": "..."}

A missing field reaches the store as None and comes back as the same 400
validation_error as an empty one, rather than FastAPI's 422.
"""

import logging
from typing import Any, Mapping, Optional, Tuple

from fastapi import APIRouter, Depends, Request, Response

from notecache.dependencies import get_note_store
from notecache.exceptions import ValidationError
from notecache.schemas.note import ErrorResponse
from notecache.services.note_store import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Write"])

_WRITE_FIELDS_SCHEMA = {
    "type": "object",
    "properties": {
        "note_name": {"type": "string", "description": "Name of the new note"},
        "note": {"type": "string", "description": "Text of the new note"},
    },
    "required": ["note_name", "note"],
}


def _string_field(fields: Mapping[str, Any], key: str) -> Optional[str]:
    """A field's value when it is text; None when absent; 400 for anything else."""
    value = fields.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ValidationError(message=f"Field '{key}' must be text", field=key)


async def read_write_fields(request: Request) -> Tuple[Optional[str], Optional[str]]:
    """
    Extract (note_name, note) from a JSON or form-encoded body.

    Raises:  ValidationError for malformed JSON or a JSON body that is not an
             object.
    """
    media_type = request.headers.get("content-type", "").partition(";")[0].strip().lower()

    if media_type == "application/json":
        try:
            fields = await request.json()
        except ValueError:
            raise ValidationError(message="Invalid JSON body", field="body")
        if not isinstance(fields, dict):
            raise ValidationError(message="JSON body must be an object", field="body")
    else:
        fields = await request.form()

    return _string_field(fields, "note_name"), _string_field(fields, "note")


@router.post(
    "/write",
    status_code=201,
    responses={
        201: {"description": "Note created"},
        400: {"description": "Missing field or note already exists", "model": ErrorResponse},
        500: {"description": "Write failed", "model": ErrorResponse},
    },
    summary="Create a new note",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "multipart/form-data": {"schema": _WRITE_FIELDS_SCHEMA},
                "application/x-www-form-urlencoded": {"schema": _WRITE_FIELDS_SCHEMA},
                "application/json": {"schema": _WRITE_FIELDS_SCHEMA},
            },
        }
    },
)
async def write_note(
    request: Request,
    store: NoteStore = Depends(get_note_store),
) -> Response:
    note_name, note = await read_write_fields(request)
    await store.create(note_name, note)
    return Response(status_code=201)
