"""Device command adapter driving the v4lctl command-line utility."""

from __future__ import annotations

import logging
import re
import shlex
import shutil
import subprocess
from collections.abc import Sequence

LOGGER = logging.getLogger(__name__)

DEFAULT_TOOL = "v4lctl"
DEFAULT_DEVICE = "/dev/video0"


class V4lctlAdapter:
    def __init__(self, device: str = DEFAULT_DEVICE, *, tool: str = DEFAULT_TOOL) -> None:
        self.device = device
        self.tool = tool

    def available(self) -> bool:
        return shutil.which(self.tool) is not None

    def read(self, name: str) -> str:
        """Run ``show "<name>"`` and extract the value token from the first output line.

        Launch failures, empty output, unknown attributes and unparseable lines
        all yield ``""``.
        """
        cmd = [self.tool, "-c", self.device, "show", name]
        result = _run(cmd)
        if result is None:
            return ""

        lines = (result.stdout or "").splitlines()
        value = ""
        if lines:
            match = re.match(rf"^{re.escape(name)}: ([a-zA-Z0-9\-]+)", lines[0])
            if match:
                value = match.group(1)
        LOGGER.info("Call '%s' Result: %s", shlex.join(cmd), value)
        return value

    def write(self, command: str, value: str) -> bool:
        """Run ``<command> <value>``, e.g. ``setattr "Auto Mute" off`` or ``bright 70%``.

        Returns ``True`` when the utility was launched and ran to completion,
        whatever its exit status. v4lctl does not reliably report rejected
        values, so success only means "command executed", never "value
        applied on hardware".
        """
        try:
            args = shlex.split(command)
        except ValueError as exc:
            LOGGER.error("Call failed, cannot parse command '%s': %s", command, exc)
            return False
        cmd = [self.tool, "-c", self.device, *args, value]
        LOGGER.info("Call '%s'", shlex.join(cmd))
        result = _run(cmd)
        if result is None:
            return False
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            LOGGER.warning("'%s' exited with status %s: %s", shlex.join(cmd), result.returncode, stderr)
        return True


def _run(cmd: Sequence[str]) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            cmd,
            check=False,
            capture_output=True,
            text=True,
            errors="replace",
        )
    except (OSError, ValueError) as exc:
        LOGGER.error("Call failed '%s': %s", shlex.join(cmd), exc)
        return None
