"""SQL-backed content store with per-file version history"""

from __future__ import annotations
import asyncio
import difflib
import hashlib
import logging
from datetime import datetime

from sqlmodel import Session, select

from pagemigrate.crud.store import ContentFile, ContentStore
from pagemigrate.crud.tables import ContentRecord, ContentVersion


logger = logging.getLogger(__name__)


def content_hash(content: str) -> str:
    """Hex SHA-256 of content; fits the String(64) hash columns."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def get_record(session: Session, path: str) -> ContentRecord | None:
    """Return the ContentRecord stored at path, or None if not found."""
    return session.exec(select(ContentRecord).where(ContentRecord.path == path)).one_or_none()


def list_paths(session: Session, prefix: str = "") -> list[str]:
    """Return sorted stored paths, optionally restricted to those under prefix."""
    paths = session.exec(select(ContentRecord.path)).all()
    return sorted(p for p in paths if p.startswith(prefix))


class SQLContentStore(ContentStore):
    """Content files in SQL tables; each changed put commits and keeps the prior state as a ContentVersion.

    Sessions are synchronous, so get_content and put_content run them in a
    worker thread via asyncio.to_thread. history and diff are plain calls.
    At most max_versions prior versions are kept per file (0 keeps all).
    """

    def __init__(self, engine, max_versions: int = 10):
        self.engine = engine
        self.max_versions = max_versions

    async def get_content(self, path: str) -> ContentFile | None:
        return await asyncio.to_thread(self._read, path)

    async def put_content(self, path: str, content: str, message: str) -> bool:
        return await asyncio.to_thread(self._write, path, content, message)

    def _read(self, path: str) -> ContentFile | None:
        with Session(self.engine) as session:
            record = get_record(session, path)
            return ContentFile(path=record.path, content=record.content) if record else None

    def _write(self, path: str, content: str, message: str) -> bool:
        digest = content_hash(content)
        with Session(self.engine) as session:
            record = get_record(session, path)
            if record is not None and record.hash == digest:
                return False
            if record is None:
                record = ContentRecord(path=path, content=content, hash=digest, message=message)
            else:
                self._snapshot(session, record)
                record.content = content
                record.hash = digest
                record.message = message
                record.updated_at = datetime.now()
            session.add(record)
            session.commit()
        logger.debug("wrote %s (%s)", path, message)
        return True

    def _versions(self, session: Session, record: ContentRecord) -> list[ContentVersion]:
        query = select(ContentVersion).where(ContentVersion.file_id == record.id).order_by(ContentVersion.version_num)
        return list(session.exec(query).all())

    def _snapshot(self, session: Session, record: ContentRecord) -> None:
        """Keep record's current state as its next version, dating it from when that state was written."""
        kept = self._versions(session, record)
        kept.append(ContentVersion(
            file_id=record.id,
            version_num=kept[-1].version_num + 1 if kept else 1,
            content=record.content,
            hash=record.hash,
            message=record.message,
            created_at=record.updated_at,
        ))
        session.add(kept[-1])
        if self.max_versions:
            for old in kept[:-self.max_versions]:
                session.delete(old)
            logger.debug("kept %d versions of %s", min(len(kept), self.max_versions), record.path)

    def history(self, path: str) -> list[ContentVersion]:
        """Prior versions of the file at path, oldest first; empty if the path is unknown."""
        with Session(self.engine) as session:
            record = get_record(session, path)
            return self._versions(session, record) if record else []

    def diff(self, path: str, from_num: int, to_num: int, context: int = 3) -> list[str]:
        """Unified diff lines between two prior versions of path. Raises ValueError if path or a version is missing."""
        versions = {v.version_num: v for v in self.history(path)}
        if not versions:
            raise ValueError(f"No prior versions stored for {path}")
        missing = [num for num in (from_num, to_num) if num not in versions]
        if missing:
            raise ValueError(f"Version {missing[0]} not found for {path}")
        return list(difflib.unified_diff(
            versions[from_num].content.splitlines(keepends=True),
            versions[to_num].content.splitlines(keepends=True),
            fromfile=f"v{from_num}",
            tofile=f"v{to_num}",
            n=context,
        ))
