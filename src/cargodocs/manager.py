"""Build/status coordination for crate documentation.

DocManager keeps the cache consistent with what cargo reports and what is on
disk. A cache hit is trusted for the whole TTL without re-checking the
filesystem; only a miss runs ``cargo metadata`` and probes for the crate's
``index.html``.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from cargodocs.errors import DocError, ErrorCode
from cargodocs.models.cache import DocCacheEntry

if TYPE_CHECKING:
    from cargodocs.protocols import CacheProtocol, ToolchainProtocol

log = structlog.get_logger()

MANIFEST_FILE = "Cargo.toml"
ENTRY_POINT_FILE = "index.html"


def entry_point_path(output_root: str, crate_name: str) -> str:
    return str(Path(output_root) / "doc" / crate_name / ENTRY_POINT_FILE)


class DocManager:
    """Coordinates cargo, the on-disk doc tree and the build-status cache."""

    def __init__(self, cache: CacheProtocol, toolchain: ToolchainProtocol) -> None:
        self._cache = cache
        self._toolchain = toolchain

    async def initialize(self) -> None:
        await self._cache.initialize()

    async def verify_project(self, project_path: str) -> None:
        manifest = Path(project_path) / MANIFEST_FILE
        if not await asyncio.to_thread(manifest.exists):
            raise DocError(
                code=ErrorCode.INVALID_PATH,
                message=f"Invalid project path: {project_path}. {MANIFEST_FILE} not found.",
                suggestion="Pass the absolute path of a directory containing Cargo.toml.",
                recoverable=False,
            )

    async def resolve_output_root(self, project_path: str) -> str:
        """Return cargo's target directory for the project."""
        result = await self._toolchain.metadata(project_path)
        if not result.ok:
            log.warning(
                "cargo_metadata_failed",
                project_path=project_path,
                returncode=result.returncode,
            )
            raise DocError(
                code=ErrorCode.TOOLCHAIN_ERROR,
                message="Failed to get target directory",
                suggestion="Run `cargo metadata` in the project to see what is wrong.",
                recoverable=False,
                details=result.stderr,
            )

        try:
            metadata = json.loads(result.stdout)
            target_directory = metadata["target_directory"]
            if not isinstance(target_directory, str) or not target_directory:
                raise ValueError("target_directory must be a non-empty string")
        except (ValueError, KeyError, TypeError) as exc:
            raise DocError(
                code=ErrorCode.TOOLCHAIN_ERROR,
                message="Failed to get target directory",
                suggestion="cargo metadata returned unexpected output; check the toolchain.",
                recoverable=False,
                details=str(exc),
            ) from exc

        return target_directory

    async def check_status(self, project_path: str, crate_name: str) -> bool:
        """Return whether documentation for the crate has been built."""
        await self.verify_project(project_path)

        cached = await self._cache.get(project_path, crate_name)
        if cached is not None:
            log.debug("doc_status_cache_hit", crate_name=crate_name, is_built=cached.is_built)
            return cached.is_built

        output_root = await self.resolve_output_root(project_path)
        doc_path = entry_point_path(output_root, crate_name)
        is_built = await asyncio.to_thread(Path(doc_path).exists)

        await self._cache.set(
            DocCacheEntry(
                crate_name=crate_name,
                project_path=project_path,
                doc_path=doc_path,
                is_built=is_built,
            )
        )
        log.info("doc_status_checked", crate_name=crate_name, is_built=is_built)
        return is_built

    async def build(
        self,
        project_path: str,
        crate_name: str,
        skip_dependencies: bool = False,
    ) -> str:
        """Run ``cargo doc`` for one crate and return its entry-point path.

        ``skip_dependencies`` is accepted for interface compatibility only;
        dependency docs are always excluded.
        """
        await self.verify_project(project_path)

        log.info("doc_build_started", crate_name=crate_name, skip_dependencies=skip_dependencies)
        result = await self._toolchain.doc(project_path, crate_name)
        if not result.ok:
            log.warning("doc_build_failed", crate_name=crate_name, returncode=result.returncode)
            raise DocError(
                code=ErrorCode.BUILD_FAILED,
                message="Failed to build documentation",
                suggestion="Fix the errors reported by cargo doc and build again.",
                recoverable=True,
                details=result.stderr,
            )

        output_root = await self.resolve_output_root(project_path)
        doc_path = entry_point_path(output_root, crate_name)
        await self._cache.set(
            DocCacheEntry(
                crate_name=crate_name,
                project_path=project_path,
                doc_path=doc_path,
                is_built=True,
            )
        )
        log.info("doc_build_complete", crate_name=crate_name, doc_path=doc_path)
        return doc_path

    async def get_doc_path(self, project_path: str, crate_name: str) -> DocCacheEntry | None:
        """Return the cached entry for a crate without invoking cargo."""
        return await self._cache.get(project_path, crate_name)

    async def invalidate(self, project_path: str, crate_name: str) -> None:
        await self._cache.remove(project_path, crate_name)

    async def require_doc_dir(self, project_path: str, crate_name: str) -> Path:
        """Return the crate's doc directory, failing unless docs are built."""
        if not await self.check_status(project_path, crate_name):
            raise DocError(
                code=ErrorCode.SEARCH_FAILED,
                message="Documentation not built. Please build the documentation first.",
                suggestion="Call build_doc for this crate, then retry.",
                recoverable=True,
            )

        cached = await self._cache.get(project_path, crate_name)
        if cached is None:
            raise DocError(
                code=ErrorCode.CACHE_ERROR,
                message="Cache error: Documentation entry not found",
                suggestion="Retry the request; the cache entry was removed concurrently.",
                recoverable=True,
            )

        return Path(cached.doc_path).parent
