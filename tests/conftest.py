"""Shared test fixtures for the cargodocs test suite."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pytest

from cargodocs.cache import DocCache
from cargodocs.manager import DocManager
from cargodocs.toolchain import CommandResult

if TYPE_CHECKING:
    from pathlib import Path

CRATE = "my-crate"


def _page(title: str, body: str = "") -> str:
    return (
        "<!DOCTYPE html><html><head><title>"
        f"{title}</title><script>var searchIndex = 'Widget';</script></head>"
        '<body><nav class="sidebar">Sidebar</nav>'
        f'<main><section id="main-content"><h1>{title}</h1>{body}</section></main>'
        "</body></html>"
    )


# Relative path -> HTML content for a small generated doc tree.
DOC_TREE: dict[str, str] = {
    "index.html": _page("Crate my_crate", "<p>A crate of widgets.</p>"),
    "all.html": _page("List of all items", "<ul><li>Widget</li><li>Color</li></ul>"),
    "struct.Widget.html": _page("Struct my_crate::Widget", "<p>A widget you can render.</p>"),
    "struct.Foo-Bar.html": _page("Struct my_crate::Foo::Bar", "<p>Nested name.</p>"),
    "enum.Color.html": _page("Enum my_crate::Color", "<p>Colours for a Widget.</p>"),
    "fn.make_widget.html": _page("Function my_crate::make_widget", "<p>Builds one.</p>"),
    "trait.Render.html": _page("Trait my_crate::Render", "<p>Drawing.</p>"),
    "io/index.html": _page("Module my_crate::io", "<p>I/O helpers.</p>"),
    "io/struct.Reader.html": _page("Struct my_crate::io::Reader", "<p>Reads bytes.</p>"),
    "io/fn.read_all.html": _page("Function my_crate::io::read_all", "<p>Reads all.</p>"),
    "io/implementors/fn.ghost.html": _page("Ghost", "<p>Widget implementor.</p>"),
    "src/lib.rs.html": _page("lib.rs", "<pre>pub struct Widget;</pre>"),
    "implementors/struct.Hidden.html": _page("Hidden", "<p>Widget.</p>"),
}


@dataclass
class FakeToolchain:
    """In-memory stand-in for cargo implementing ToolchainProtocol."""

    target_dir: str
    metadata_result: CommandResult | None = None
    doc_result: CommandResult | None = None
    metadata_calls: list[str] = field(default_factory=list)
    doc_calls: list[tuple[str, str]] = field(default_factory=list)

    async def metadata(self, project_path: str) -> CommandResult:
        self.metadata_calls.append(project_path)
        if self.metadata_result is not None:
            return self.metadata_result
        return CommandResult(
            returncode=0,
            stdout=json.dumps({"target_directory": self.target_dir, "packages": []}),
            stderr="",
        )

    async def doc(self, project_path: str, crate_name: str) -> CommandResult:
        self.doc_calls.append((project_path, crate_name))
        if self.doc_result is not None:
            return self.doc_result
        return CommandResult(returncode=0, stdout="", stderr="")


def write_doc_tree(target_dir: Path, crate_name: str = CRATE) -> Path:
    """Create a fake rustdoc tree under <target_dir>/doc/<crate_name>/."""
    crate_dir = target_dir / "doc" / crate_name
    for relative, content in DOC_TREE.items():
        path = crate_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return crate_dir


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """A directory that looks like a Rust project."""
    project = tmp_path / "project"
    project.mkdir()
    (project / "Cargo.toml").write_text('[package]\nname = "my-crate"\n', encoding="utf-8")
    return project


@pytest.fixture()
def target_dir(tmp_path: Path) -> Path:
    target = tmp_path / "target"
    target.mkdir()
    return target


@pytest.fixture()
def built_docs(target_dir: Path) -> Path:
    """Crate doc directory populated with DOC_TREE."""
    return write_doc_tree(target_dir)


@pytest.fixture()
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "cache.json"


@pytest.fixture()
async def cache(cache_path: Path) -> DocCache:
    doc_cache = DocCache(cache_path)
    await doc_cache.initialize()
    return doc_cache


@pytest.fixture()
def toolchain(target_dir: Path) -> FakeToolchain:
    return FakeToolchain(target_dir=str(target_dir))


@pytest.fixture()
async def manager(cache: DocCache, toolchain: FakeToolchain) -> DocManager:
    doc_manager = DocManager(cache, toolchain)
    await doc_manager.initialize()
    return doc_manager
