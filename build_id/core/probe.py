"""
Probe runner — run one external tool, capture everything it prints.

A probe never fails: a missing program, a crash or a non-zero exit
all come back as text, and that text becomes part of the preimage.
"Compiler absent" is therefore a fingerprint of its own, not an error.
"""
import logging
import shlex
import subprocess
from typing import Mapping, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


class ProbeRunner(Protocol):
    """Runs a named command with arguments and returns its combined output."""

    def run(self, command: str, args: Sequence[str]) -> str:
        ...


class SubprocessProbeRunner:
    """ProbeRunner backed by ``subprocess``; stderr is merged into stdout."""

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        self.env = dict(env) if env is not None else None

    def run(self, command: str, args: Sequence[str]) -> str:
        try:
            argv = shlex.split(command) + list(args)
        except ValueError as e:
            # Unbalanced quotes in the configured command
            return f"{command}: {e}\n"

        if not argv:
            return ""

        logger.debug("probe: %s", shlex.join(argv))
        try:
            proc = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                env=self.env,
                check=False,
            )
        except FileNotFoundError:
            return f"{argv[0]}: command not found\n"
        except PermissionError:
            return f"{argv[0]}: permission denied\n"
        except OSError as e:
            return f"{argv[0]}: {e.strerror or e}\n"

        if proc.returncode != 0:
            logger.debug("probe %s exited with %d", argv[0], proc.returncode)

        return proc.stdout.decode("utf-8", errors="surrogateescape")
