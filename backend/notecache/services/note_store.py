"""
NoteCache — Note Store (Filesystem-Backed Storage)
===================================================

What:  Maps a note name to its text, persisted as one file per note.
Why:   The whole service is a translation of HTTP verbs into these five
       operations; keeping them here keeps the routes free of file I/O.
How:   `<name>.txt` inside a single flat storage root. Async file I/O via
       aiofiles so reads and writes do not block the event loop.
Who:   Built once by `create_app()` and handed to route handlers through the
       `get_note_store` dependency.

Addressing:
    storage_root/
    ├── groceries.txt      ← note "groceries"
    ├── Groceries.txt      ← note "Groceries" (names are case-sensitive)
    └── todo 2024.txt      ← note "todo 2024" (no trimming, no normalization)

    A name is used verbatim. The only names rejected are the ones that cannot
    be a single filename inside the root: those containing a path separator or
    a NUL byte, and those whose `<name>.txt` exceeds the filesystem's name
    length limit. Only regular files count as notes; a directory called
    `x.txt` is not note "x".

Consistency:
    No index, cache, or lock. Every call re-touches the filesystem, so the
    directory is the only state. Create opens the file in exclusive mode, which
    makes two racing creates of the same name fail cleanly for the loser. Every
    other race (update vs delete, two updates) is last-writer-wins and a crash
    mid-write can leave truncated content.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Union

import aiofiles
import aiofiles.os

from notecache.exceptions import (
    AlreadyExistsError,
    FileStorageError,
    NotFoundError,
    ValidationError,
)
from notecache.schemas.note import Note

logger = logging.getLogger(__name__)

# What: Suffix appended to every note name to form its file name
NOTE_SUFFIX = ".txt"

# What: Encoding of every note file on disk
NOTE_ENCODING = "utf-8"

_FORBIDDEN_IN_NAME = tuple(sep for sep in ("/", os.sep, os.altsep, "\x00") if sep)

# What: File name length limit when the filesystem does not report one
DEFAULT_NAME_MAX = 255


def _name_max(root: Path) -> int:
    """Longest file name, in bytes, the filesystem under root accepts."""
    try:
        return os.pathconf(root, "PC_NAME_MAX")
    except (AttributeError, OSError, ValueError):
        # pathconf is POSIX-only and some filesystems do not report the limit
        return DEFAULT_NAME_MAX


class NoteStore:
    """
    Stateless storage logic over a persistent directory.

    Operations:
        exists(name)        → bool
        get(name)           → text            | NotFoundError
        create(name, text)  → None            | ValidationError, AlreadyExistsError
        update(name, text)  → None            | NotFoundError, ValidationError
        delete(name)        → None            | NotFoundError
        list()              → List[Note]

    Any OS-level failure while reading, writing, or deleting a single note is
    raised as FileStorageError. `list()` is the exception: a note that cannot be
    read is logged and skipped so that one bad file does not hide the others.
    """

    def __init__(self, root: Union[str, Path]):
        """
        Args:
            root: Storage root directory. Created (with parents) if missing.
        """
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.name_max = _name_max(self.root)
        logger.info("NoteStore initialized with storage_root=%s", self.root)

    # ── Addressing ────────────────────────────────────────────────────────

    def _locate(self, name: Optional[str]) -> Optional[Path]:
        """
        Resolve a note name to its file path.

        Returns None for names that cannot address a file directly inside the
        root. Such a name can never have been created, so read-side callers
        treat None as "not found" and create treats it as invalid input.
        """
        if not name or any(sep in name for sep in _FORBIDDEN_IN_NAME):
            return None
        filename = f"{name}{NOTE_SUFFIX}"
        try:
            if len(os.fsencode(filename)) > self.name_max:
                return None
        except UnicodeEncodeError:
            return None
        return self.root / filename

    @staticmethod
    def _is_note_file(path: Optional[Path]) -> bool:
        """is_file() that reports False instead of raising for unusable paths."""
        if path is None:
            return False
        try:
            return path.is_file()
        except OSError:
            return False

    def _require(self, name: str) -> Path:
        """Resolve a name to the path of an existing note or raise NotFoundError."""
        path = self._locate(name)
        if not self._is_note_file(path):
            raise NotFoundError(resource="note", resource_id=name)
        return path

    def _note_files(self) -> Iterator[os.DirEntry]:
        """Yield directory entries for every note file in the storage root."""
        try:
            with os.scandir(self.root) as entries:
                for entry in entries:
                    if (
                        entry.name.endswith(NOTE_SUFFIX)
                        and len(entry.name) > len(NOTE_SUFFIX)
                        and entry.is_file()
                    ):
                        yield entry
        except OSError as e:
            logger.error("Failed to scan storage root %s: %s", self.root, str(e))
            raise FileStorageError(
                message="Failed to list notes. Please try again.",
                context={"path": str(self.root), "os_error": str(e)},
            )

    @staticmethod
    def _check_text(text, field: str) -> str:
        """Ensure content is a str that can be stored as UTF-8."""
        if not isinstance(text, str):
            raise ValidationError(message="Note content must be text", field=field)
        try:
            text.encode(NOTE_ENCODING)
        except UnicodeEncodeError:
            raise ValidationError(
                message="Note content is not valid UTF-8 text",
                field=field,
            )
        return text

    # ── Operations ────────────────────────────────────────────────────────

    def exists(self, name: str) -> bool:
        """True iff a note with this name is currently stored."""
        return self._is_note_file(self._locate(name))

    async def get(self, name: str) -> str:
        """
        Return the full stored content of a note.

        Raises:
            NotFoundError if the note does not exist.
            FileStorageError if the file exists but cannot be read.
        """
        path = self._require(name)
        try:
            # newline="": return the bytes' line endings untouched
            async with aiofiles.open(path, "r", encoding=NOTE_ENCODING, newline="") as f:
                return await f.read()
        except FileNotFoundError:
            # Deleted between the existence check and the open
            raise NotFoundError(resource="note", resource_id=name)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read note %r at %s: %s", name, path, str(e))
            raise FileStorageError(
                message="Failed to read note. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )

    async def create(self, name: Optional[str], text: Optional[str]) -> None:
        """
        Persist a new note.

        Validation order matches the HTTP contract: missing fields first, then
        the name's addressability, then existence.

        Raises:
            ValidationError if name or text is empty/absent, or the name
                contains a path separator or is too long for a file name.
            FileStorageError if a non-file entry (a directory) already
                occupies `<name>.txt`, or the write fails.
            AlreadyExistsError if a note with this name is already stored.
        """
        if not name or not text:
            raise ValidationError(
                message="Missing note_name or note",
                field="note_name" if not name else "note",
            )
        self._check_text(text, field="note")

        path = self._locate(name)
        if path is None:
            raise ValidationError(
                message="Note name cannot be stored as a single file",
                field="note_name",
                context={"name": name},
            )
        if self._is_note_file(path):
            raise AlreadyExistsError(name)

        try:
            async with aiofiles.open(path, "x", encoding=NOTE_ENCODING, newline="") as f:
                await f.write(text)
        except FileExistsError as e:
            if self._is_note_file(path):
                raise AlreadyExistsError(name)
            # Something other than a note (a directory) already holds the name
            logger.error("Cannot create note %r, %s is not a regular file", name, path)
            raise FileStorageError(
                message="Failed to save note. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )
        except OSError as e:
            logger.error("Failed to create note %r at %s: %s", name, path, str(e))
            await self._discard(path)
            raise FileStorageError(
                message="Failed to save note. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.info("Note created: %r (%d chars)", name, len(text))

    async def update(self, name: str, text: str) -> None:
        """
        Fully replace the content of an existing note.

        An empty string is accepted and leaves an empty note behind.

        Raises:
            NotFoundError if the note does not exist (nothing is created).
            ValidationError if text is not a str.
            FileStorageError if the write fails.
        """
        path = self._require(name)
        self._check_text(text, field="text")

        try:
            async with aiofiles.open(path, "w", encoding=NOTE_ENCODING, newline="") as f:
                await f.write(text)
        except OSError as e:
            logger.error("Failed to update note %r at %s: %s", name, path, str(e))
            raise FileStorageError(
                message="Failed to save note. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.info("Note updated: %r (%d chars)", name, len(text))

    async def delete(self, name: str) -> None:
        """
        Permanently remove a note.

        Raises:
            NotFoundError if the note does not exist.
            FileStorageError if the unlink fails.
        """
        path = self._require(name)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            raise NotFoundError(resource="note", resource_id=name)
        except OSError as e:
            logger.error("Failed to delete note %r at %s: %s", name, path, str(e))
            raise FileStorageError(
                message="Failed to delete note. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.info("Note deleted: %r", name)

    async def list(self) -> List[Note]:
        """
        Enumerate every stored note with its full content.

        Order is directory enumeration order. Cost is linear in the number of
        notes and in total stored bytes: every call reads every file.

        A note whose file cannot be read (I/O error, invalid UTF-8, removed
        mid-scan) is skipped with a warning; the rest of the listing is
        returned.
        """
        notes: List[Note] = []
        for entry in self._note_files():
            name = entry.name[: -len(NOTE_SUFFIX)]
            try:
                async with aiofiles.open(
                    entry.path, "r", encoding=NOTE_ENCODING, newline=""
                ) as f:
                    text = await f.read()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping unreadable note %r: %s", name, str(e))
                continue
            notes.append(Note(name=name, text=text))
        return notes

    # ── Maintenance ───────────────────────────────────────────────────────

    def count(self) -> int:
        """Number of note files in the root, without reading their content."""
        return sum(1 for _ in self._note_files())

    def is_writable(self) -> bool:
        """True when the storage root exists and accepts new files."""
        return self.root.is_dir() and os.access(self.root, os.W_OK | os.X_OK)

    async def _discard(self, path: Path) -> None:
        """
        Remove a partially written file after a failed create.

        Best-effort: the original failure is what the caller reports, so an
        error here is only logged.
        """
        try:
            if path.is_file():
                await aiofiles.os.remove(path)
                logger.info("Cleaned up partial note file: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up %s: %s", path.name, str(e))
