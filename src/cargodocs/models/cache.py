from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocCacheEntry(BaseModel):
    """Build status and entry-point location of one crate's documentation.

    Serialised with camelCase keys (``crateName``, ``lastBuildTime``, ...) so
    the JSON store keeps the established cache file layout.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    crate_name: str
    project_path: str
    doc_path: str  # <target>/doc/<crate>/index.html, recorded even when not built
    last_build_time: int = 0  # Epoch milliseconds, stamped by DocCache.set
    is_built: bool = False

    @property
    def key(self) -> str:
        return cache_key(self.project_path, self.crate_name)


def cache_key(project_path: str, crate_name: str) -> str:
    return f"{project_path}:{crate_name}"
