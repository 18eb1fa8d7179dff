"""
NoteCache — Package Initializer
================================

What: Marks the `notecache` directory as a Python package.
Why:  Enables imports like `from notecache.config import Settings`.
Who:  Used by uvicorn, pytest, and the `python -m notecache` entry point.

Architecture Note:
    The service is a thin HTTP layer over a directory of text files:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        NoteStore (Storage Logic)    │  ← name → <name>.txt, error kinds
    ├─────────────────────────────────────┤
    │       Storage root (filesystem)     │  ← one UTF-8 file per note
    └─────────────────────────────────────┘

    Routes never touch the filesystem directly; the store never knows about
    HTTP status codes. Exceptions raised by the store are mapped to responses
    by the handlers registered in main.py.
"""

__version__ = "1.0.0"
