"""Transports that turn diagram source into serialized SVG.

Two engines are provided: a Kroki HTTP client and a local command runner.
Renderers own one engine each and decide which to build from config.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from urllib.parse import urlparse

import httpx

from markdoc.errors import InitializationError, RenderError

logger = logging.getLogger(__name__)

_DEFAULT_KROKI_URL = "https://kroki.io"


class DiagramEngine(ABC):
    """Something that can turn diagram source into an SVG string."""

    name: str = "engine"

    @abstractmethod
    async def start(self) -> None:
        """Prepare the engine. Raises InitializationError on failure."""
        ...

    @abstractmethod
    async def to_svg(self, code: str) -> str:
        """Return serialized SVG for *code*. Raises RenderError on failure."""
        ...

    async def aclose(self) -> None:
        return None


def _validate_base_url(url: str) -> str:
    """Validate a Kroki base URL.

    Raises ValueError if the URL is malformed or contains injection patterns.
    """
    if "\r" in url or "\n" in url:
        raise ValueError("CRLF injection detected in Kroki URL")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Kroki URL must be http(s), got {parsed.scheme or 'no scheme'}")
    if not parsed.hostname:
        raise ValueError(f"Kroki URL has no host: {url}")

    return url


class KrokiEngine(DiagramEngine):
    """Renders through a Kroki server (``POST /{type}/svg``) using httpx."""

    name = "kroki"

    def __init__(
        self,
        diagram_type: str,
        url: str = _DEFAULT_KROKI_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.diagram_type = diagram_type
        self._url = url
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        try:
            base_url = _validate_base_url((self._url or _DEFAULT_KROKI_URL).rstrip("/"))
        except ValueError as e:
            raise InitializationError(self.name, str(e)) from e
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        logger.debug("Kroki engine ready: %s/%s", base_url, self.diagram_type)

    async def to_svg(self, code: str) -> str:
        if self._client is None:
            raise InitializationError(self.name, "engine used before start()")

        try:
            resp = await self._client.post(
                f"/{self.diagram_type}/svg",
                content=code.encode("utf-8"),
                headers={"Content-Type": "text/plain"},
            )
        except httpx.HTTPError as e:
            raise RenderError(f"Kroki request failed: {e}") from e

        if resp.status_code != 200:
            detail = resp.text.strip()[:500] if resp.text else ""
            raise RenderError(detail or f"Kroki returned HTTP {resp.status_code}")
        return resp.text

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class CommandEngine(DiagramEngine):
    """Runs a local executable (``dot``, ``mmdc``, ``pikchr`` ...).

    ``{input}`` and ``{output}`` placeholders in the command are replaced
    with temp file paths. Without ``{input}`` the source goes to stdin;
    without ``{output}`` the SVG is read from stdout.
    """

    name = "command"

    def __init__(self, command: Sequence[str], timeout: float = 30.0) -> None:
        self.command = list(command)
        self._timeout = timeout
        self._executable: str | None = None

    async def start(self) -> None:
        if not self.command:
            raise InitializationError(self.name, "empty command")
        program = self.command[0]
        executable = shutil.which(program)
        if executable is None:
            raise InitializationError(program, f"executable '{program}' not found on PATH")
        self._executable = executable
        logger.debug("Command engine ready: %s", executable)

    async def to_svg(self, code: str) -> str:
        if self._executable is None:
            raise InitializationError(self.name, "engine used before start()")

        program = self.command[0]
        uses_input = any("{input}" in arg for arg in self.command[1:])
        uses_output = any("{output}" in arg for arg in self.command[1:])

        with tempfile.TemporaryDirectory(prefix="markdoc-") as tmp:
            input_path = Path(tmp) / "diagram.txt"
            output_path = Path(tmp) / "diagram.svg"
            if uses_input:
                input_path.write_text(code, encoding="utf-8")
            argv = [self._executable] + [
                arg.replace("{input}", str(input_path)).replace("{output}", str(output_path))
                for arg in self.command[1:]
            ]

            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL if uses_input else asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            try:
                stdout, stderr = await asyncio.wait_for(
                    proc.communicate(None if uses_input else code.encode("utf-8")),
                    timeout=self._timeout,
                )
            except asyncio.TimeoutError:
                proc.kill()
                await proc.wait()
                raise RenderError(f"{program} timed out after {self._timeout:g}s") from None

            if proc.returncode != 0:
                message = stderr.decode("utf-8", errors="replace").strip()
                raise RenderError(message or f"{program} exited with status {proc.returncode}")

            if uses_output:
                if not output_path.is_file():
                    raise RenderError(f"{program} produced no output file")
                return output_path.read_text(encoding="utf-8")
            return stdout.decode("utf-8", errors="replace")
