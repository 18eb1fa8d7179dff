"""
NoteCache — Notes Route Handlers
=================================

What:  GET/PUT/DELETE /notes/{name} and GET /notes.
Why:   Read, replace, remove, and enumerate stored notes over HTTP.
How:   Each handler resolves the NoteStore dependency and performs exactly one
       store operation. Errors propagate to the global exception handlers.

Bodies:
    GET /notes/{name}   → text/plain, the stored text verbatim
    PUT /notes/{name}   ← text/* body, decoded with its declared charset
    GET /notes          → application/json, [{"name": ..., "text": ...}, ...]
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse

from notecache.dependencies import get_note_store
from notecache.exceptions import NotFoundError, ValidationError
from notecache.schemas.note import ErrorResponse, Note
from notecache.services.note_store import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

DEFAULT_CHARSET = "utf-8"


async def read_text_body(request: Request) -> str:
    """
    Decode a request body that must be plain text.

    What:    Accepts any `text/*` content type and honours its charset
             parameter (UTF-8 when absent).
    Raises:  ValidationError when the content type is not text or the bytes do
             not decode with the declared charset.
    """
    content_type = request.headers.get("content-type", "")
    media_type, _, params = content_type.partition(";")
    media_type = media_type.strip().lower()
    if not media_type.startswith("text/"):
        raise ValidationError(
            message="Invalid request body: expected text content",
            field="body",
            context={"content_type": content_type},
        )

    charset = DEFAULT_CHARSET
    for param in params.split(";"):
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            charset = value.strip().strip('"')

    body = await request.body()
    try:
        return body.decode(charset)
    except (LookupError, UnicodeDecodeError) as e:
        raise ValidationError(
            message="Invalid request body: content is not valid text",
            field="body",
            context={"charset": charset, "error": str(e)},
        )


@router.get(
    "/notes",
    response_model=List[Note],
    summary="List all notes",
    description=(
        "Returns every stored note with its full text. Order follows the "
        "storage directory and is not guaranteed. There is no pagination."
    ),
)
async def list_notes(store: NoteStore = Depends(get_note_store)) -> List[Note]:
    return await store.list()


@router.get(
    "/notes/{name}",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "Note text", "content": {"text/plain": {}}},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Get the content of one note",
)
async def get_note(name: str, store: NoteStore = Depends(get_note_store)) -> PlainTextResponse:
    text = await store.get(name)
    return PlainTextResponse(text)


@router.put(
    "/notes/{name}",
    responses={
        200: {"description": "Note updated"},
        400: {"description": "Body is not text", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Write failed", "model": ErrorResponse},
    },
    summary="Replace the content of an existing note",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"text/plain": {"schema": {"type": "string"}}},
        }
    },
)
async def update_note(
    name: str,
    request: Request,
    store: NoteStore = Depends(get_note_store),
) -> Response:
    """
    Replace a note's text with the request body.

    Existence is checked before the body is read, so an unknown name is a 404
    even when the body is also invalid.
    """
    if not store.exists(name):
        raise NotFoundError(resource="note", resource_id=name)
    text = await read_text_body(request)
    await store.update(name, text)
    return Response(status_code=200)


@router.delete(
    "/notes/{name}",
    responses={
        200: {"description": "Note deleted"},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(name: str, store: NoteStore = Depends(get_note_store)) -> Response:
    await store.delete(name)
    return Response(status_code=200)
