"""Thin async wrapper around the ``cargo`` executable.

Only two invocations are needed: ``cargo metadata`` to learn the target
directory and ``cargo doc`` to generate documentation. Both run in the
project directory. No timeout is applied; a hung cargo blocks the request.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import structlog

from cargodocs.errors import DocError, ErrorCode

log = structlog.get_logger()

METADATA_ARGS = ("metadata", "--format-version=1", "--no-deps")


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Cargo:
    """Runs cargo subcommands, implementing ToolchainProtocol."""

    def __init__(self, executable: str = "cargo") -> None:
        self._executable = executable

    async def metadata(self, project_path: str) -> CommandResult:
        return await self._run(METADATA_ARGS, cwd=project_path)

    async def doc(self, project_path: str, crate_name: str) -> CommandResult:
        # --no-deps is unconditional: dependency docs are never generated.
        return await self._run(("doc", "--no-deps", "-p", crate_name), cwd=project_path)

    async def _run(self, args: tuple[str, ...], *, cwd: str) -> CommandResult:
        cmd = [self._executable, *args]
        log.debug("cargo_invoked", cmd=cmd, cwd=cwd)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
            stdout_bytes, stderr_bytes = await proc.communicate()
        except OSError as exc:
            raise DocError(
                code=ErrorCode.TOOLCHAIN_ERROR,
                message=f"Failed to run {self._executable}: {exc}",
                suggestion="Make sure the Rust toolchain is installed and cargo is on PATH.",
                recoverable=False,
                details=str(exc),
            ) from exc

        result = CommandResult(
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout_bytes.decode(errors="replace"),
            stderr=stderr_bytes.decode(errors="replace"),
        )
        log.debug("cargo_finished", cmd=cmd, returncode=result.returncode)
        return result
