from dataclasses import dataclass, field

from pagemigrate.crud.store import ContentFile, ContentStore


@dataclass
class MemoryContentStore(ContentStore):
    _files: dict[str, str] = field(default_factory=dict)
    commits: list[tuple[str, str]] = field(default_factory=list)

    async def get_content(self, path: str) -> ContentFile | None:
        if path not in self._files:
            return None
        return ContentFile(path=path, content=self._files[path])

    async def put_content(self, path: str, content: str, message: str) -> bool:
        if self._files.get(path) == content:
            return False
        self._files[path] = content
        self.commits.append((path, message))
        return True
