"""
NoteCache — Request Dependencies
=================================

What:  FastAPI dependency that hands the configured NoteStore to route
       handlers.
Why:   Configuration is built once at startup and kept on `app.state`; routes
       reach it through Depends() instead of importing a module global. A test
       can build an app around its own temporary storage root.
Who:   Injected into route handlers via FastAPI's dependency injection system.

Example usage in a route:
    @router.get("/notes")
    async def list_notes(store: NoteStore = Depends(get_note_store)):
        return await store.list()
"""

from fastapi import Request

from notecache.services.note_store import NoteStore


def get_note_store(request: Request) -> NoteStore:
    """The NoteStore bound to the configured storage root."""
    return request.app.state.note_store
