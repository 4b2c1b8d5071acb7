"""
Digest — SHA-256 of the preimage bytes.

In-process ``hashlib`` by default.  When an external digest command is
configured (``SHA256SUM``), the bytes are piped into it and the hex
token is taken from its first output line.  This is the one step
allowed to fail: a broken digest command aborts with ``DigestError``.
"""
import hashlib
import logging
import re
import shlex
import subprocess

logger = logging.getLogger(__name__)

_HEX_DIGEST = re.compile(r"^[0-9a-fA-F]{64}$")


class DigestError(RuntimeError):
    """The digest step could not produce a SHA-256 hex token."""


def extract_hex_token(output: str) -> str:
    """Return the first 64-hex-digit token on the first line of *output*."""
    first_line = output.splitlines()[0] if output else ""
    for token in first_line.split():
        # openssl style: "SHA2-256(stdin)= <hex>"
        if _HEX_DIGEST.match(token):
            return token.lower()
    raise DigestError(f"no SHA-256 digest in output: {first_line!r}")


def _external_digest(command: str, data: bytes) -> str:
    try:
        argv = shlex.split(command)
    except ValueError as e:
        raise DigestError(f"cannot parse digest command {command!r}: {e}") from e
    if not argv:
        raise DigestError("empty digest command")

    logger.debug("digest: %s (%d bytes)", shlex.join(argv), len(data))
    try:
        proc = subprocess.run(
            argv,
            input=data,
            stdout=subprocess.PIPE,
            check=False,
        )
    except FileNotFoundError as e:
        raise DigestError(f"{argv[0]}: command not found") from e
    except OSError as e:
        raise DigestError(f"{argv[0]}: {e.strerror or e}") from e

    if proc.returncode != 0:
        raise DigestError(f"{argv[0]} exited with status {proc.returncode}")

    return extract_hex_token(proc.stdout.decode("utf-8", errors="replace"))


def sha256_hex(data: bytes, command: str = "") -> str:
    """Lower-case SHA-256 hex digest of *data*."""
    if not command:
        return hashlib.sha256(data).hexdigest()
    return _external_digest(command, data)
