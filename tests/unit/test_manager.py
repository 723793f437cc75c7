"""Unit tests for cargodocs.manager.DocManager.

cargo is replaced by the FakeToolchain fixture from tests/conftest.py, so
these tests exercise the coordination logic against a real cache file and a
real (temporary) documentation tree.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from cargodocs.errors import DocError, ErrorCode
from cargodocs.manager import DocManager, entry_point_path
from cargodocs.toolchain import CommandResult

if TYPE_CHECKING:
    from cargodocs.cache import DocCache

CRATE = "my-crate"


class TestVerifyProject:
    async def test_accepts_directory_with_manifest(
        self, manager: DocManager, project_dir: Path
    ) -> None:
        await manager.verify_project(str(project_dir))

    async def test_rejects_directory_without_manifest(
        self, manager: DocManager, tmp_path: Path
    ) -> None:
        with pytest.raises(DocError) as exc_info:
            await manager.verify_project(str(tmp_path))
        assert exc_info.value.code == ErrorCode.INVALID_PATH


class TestResolveOutputRoot:
    async def test_returns_target_directory(
        self, manager: DocManager, project_dir: Path, target_dir: Path
    ) -> None:
        assert await manager.resolve_output_root(str(project_dir)) == str(target_dir)

    async def test_nonzero_exit_is_toolchain_error(
        self, manager: DocManager, toolchain, project_dir: Path
    ) -> None:
        toolchain.metadata_result = CommandResult(101, "", "error: could not find Cargo.toml")
        with pytest.raises(DocError) as exc_info:
            await manager.resolve_output_root(str(project_dir))
        assert exc_info.value.code == ErrorCode.TOOLCHAIN_ERROR
        assert exc_info.value.details == "error: could not find Cargo.toml"

    @pytest.mark.parametrize(
        "stdout",
        ["not json", "{}", json.dumps({"target_directory": ""}), json.dumps([1])],
    )
    async def test_unparsable_output_is_toolchain_error(
        self, manager: DocManager, toolchain, project_dir: Path, stdout: str
    ) -> None:
        toolchain.metadata_result = CommandResult(0, stdout, "")
        with pytest.raises(DocError) as exc_info:
            await manager.resolve_output_root(str(project_dir))
        assert exc_info.value.code == ErrorCode.TOOLCHAIN_ERROR


class TestCheckStatus:
    async def test_not_built_is_cached_and_toolchain_called_once(
        self,
        manager: DocManager,
        cache: DocCache,
        toolchain,
        project_dir: Path,
        target_dir: Path,
    ) -> None:
        assert await manager.check_status(str(project_dir), CRATE) is False

        entry = await cache.get(str(project_dir), CRATE)
        assert entry is not None
        assert entry.is_built is False
        # The candidate path is recorded even though nothing was built.
        assert entry.doc_path == str(target_dir / "doc" / CRATE / "index.html")

        assert await manager.check_status(str(project_dir), CRATE) is False
        assert len(toolchain.metadata_calls) == 1

    async def test_built_docs_detected(
        self, manager: DocManager, cache: DocCache, project_dir: Path, built_docs: Path
    ) -> None:
        assert await manager.check_status(str(project_dir), CRATE) is True
        entry = await cache.get(str(project_dir), CRATE)
        assert entry is not None
        assert entry.is_built is True
        assert entry.doc_path == str(built_docs / "index.html")

    async def test_cache_hit_does_not_recheck_filesystem(
        self, manager: DocManager, project_dir: Path, built_docs: Path
    ) -> None:
        assert await manager.check_status(str(project_dir), CRATE) is True
        (built_docs / "index.html").unlink()
        # Trusted for the TTL: still reported as built.
        assert await manager.check_status(str(project_dir), CRATE) is True

    async def test_invalid_project_does_not_invoke_toolchain(
        self, manager: DocManager, toolchain, tmp_path: Path
    ) -> None:
        with pytest.raises(DocError) as exc_info:
            await manager.check_status(str(tmp_path), CRATE)
        assert exc_info.value.code == ErrorCode.INVALID_PATH
        assert toolchain.metadata_calls == []

    async def test_metadata_failure_surfaces_toolchain_error(
        self, manager: DocManager, cache: DocCache, toolchain, project_dir: Path
    ) -> None:
        toolchain.metadata_result = CommandResult(1, "", "boom")
        with pytest.raises(DocError) as exc_info:
            await manager.check_status(str(project_dir), CRATE)
        assert exc_info.value.code == ErrorCode.TOOLCHAIN_ERROR
        assert await cache.get(str(project_dir), CRATE) is None


class TestBuild:
    async def test_success_returns_doc_path_and_caches_built(
        self, manager: DocManager, cache: DocCache, toolchain, project_dir: Path
    ) -> None:
        toolchain.target_dir = "/tmp/t"

        doc_path = await manager.build(str(project_dir), CRATE, False)

        assert doc_path == str(Path("/tmp/t") / "doc" / CRATE / "index.html")
        entry = await cache.get(str(project_dir), CRATE)
        assert entry is not None
        assert entry.is_built is True
        assert entry.doc_path == doc_path
        assert toolchain.doc_calls == [(str(project_dir), CRATE)]

    @pytest.mark.parametrize("skip_dependencies", [True, False])
    async def test_skip_dependencies_does_not_change_invocation(
        self, manager: DocManager, toolchain, project_dir: Path, skip_dependencies: bool
    ) -> None:
        await manager.build(str(project_dir), CRATE, skip_dependencies)
        assert toolchain.doc_calls == [(str(project_dir), CRATE)]

    async def test_failure_raises_build_failed_with_stderr(
        self, manager: DocManager, cache: DocCache, toolchain, project_dir: Path
    ) -> None:
        stderr = "error[E0425]: cannot find value `x` in this scope\n"
        toolchain.doc_result = CommandResult(101, "", stderr)

        with pytest.raises(DocError) as exc_info:
            await manager.build(str(project_dir), CRATE)

        assert exc_info.value.code == ErrorCode.BUILD_FAILED
        assert exc_info.value.details == stderr
        assert await cache.get(str(project_dir), CRATE) is None

    async def test_invalid_project_does_not_invoke_toolchain(
        self, manager: DocManager, toolchain, tmp_path: Path
    ) -> None:
        with pytest.raises(DocError) as exc_info:
            await manager.build(str(tmp_path), CRATE)
        assert exc_info.value.code == ErrorCode.INVALID_PATH
        assert toolchain.doc_calls == []
        assert toolchain.metadata_calls == []

    async def test_build_overrides_cached_not_built(
        self, manager: DocManager, project_dir: Path
    ) -> None:
        assert await manager.check_status(str(project_dir), CRATE) is False
        await manager.build(str(project_dir), CRATE)
        assert await manager.check_status(str(project_dir), CRATE) is True


class TestRequireDocDir:
    async def test_not_built_is_search_failed(
        self, manager: DocManager, project_dir: Path
    ) -> None:
        with pytest.raises(DocError) as exc_info:
            await manager.require_doc_dir(str(project_dir), CRATE)
        assert exc_info.value.code == ErrorCode.SEARCH_FAILED

    async def test_returns_crate_directory(
        self, manager: DocManager, project_dir: Path, built_docs: Path
    ) -> None:
        assert await manager.require_doc_dir(str(project_dir), CRATE) == built_docs

    async def test_missing_entry_after_positive_check_is_cache_error(
        self, manager: DocManager, cache: DocCache, project_dir: Path, built_docs: Path
    ) -> None:
        original_get = cache.get
        calls = 0

        async def evicting_get(project_path: str, crate_name: str):
            nonlocal calls
            calls += 1
            if calls == 1:
                return await original_get(project_path, crate_name)
            return None

        await manager.check_status(str(project_dir), CRATE)
        cache.get = evicting_get  # type: ignore[method-assign]

        with pytest.raises(DocError) as exc_info:
            await manager.require_doc_dir(str(project_dir), CRATE)
        assert exc_info.value.code == ErrorCode.CACHE_ERROR


class TestGetDocPathAndInvalidate:
    async def test_unknown_crate_returns_none(
        self, manager: DocManager, toolchain, project_dir: Path
    ) -> None:
        assert await manager.get_doc_path(str(project_dir), CRATE) is None
        assert toolchain.metadata_calls == []

    async def test_invalidate_forces_recheck(
        self, manager: DocManager, toolchain, project_dir: Path
    ) -> None:
        await manager.check_status(str(project_dir), CRATE)
        await manager.invalidate(str(project_dir), CRATE)
        assert await manager.get_doc_path(str(project_dir), CRATE) is None

        await manager.check_status(str(project_dir), CRATE)
        assert len(toolchain.metadata_calls) == 2


def test_entry_point_path() -> None:
    assert entry_point_path("/tmp/t", "my-crate") == str(
        Path("/tmp/t") / "doc" / "my-crate" / "index.html"
    )
