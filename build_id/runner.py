"""
Build-id runner — top-level orchestration: environment + salt → digest.

``compute_build_id`` is the programmatic entry point; ``main`` is the
CLI used by the build system:

    CC=cc CXX=c++ AR=ar build-id my-salt
    <64 lower-case hex digits>

Every argument is a salt token taken verbatim, so there are no options.
stdout carries the digest and nothing else; logs and the ``DEBUG``
preimage echo go to stderr.
"""
import logging
import os
import sys
from typing import BinaryIO, List, Optional, Sequence

from build_id.config import Settings, ToolchainConfig
from build_id.core.digest import DigestError, sha256_hex
from build_id.core.preimage import build_preimage
from build_id.core.probe import ProbeRunner, SubprocessProbeRunner
from build_id.io.schema import Fingerprint
from build_id.policy.profile import ProbeProfile

logger = logging.getLogger(__name__)


def _echo_preimage(data: bytes, stream: Optional[BinaryIO] = None) -> None:
    """Write the preimage bytes unmodified to *stream* (default: stderr)."""
    if stream is None:
        stream = getattr(sys.stderr, "buffer", None)
    if stream is None:
        # Text-only stderr (e.g. replaced by a StringIO)
        sys.stderr.write(data.decode("utf-8", errors="surrogateescape"))
        sys.stderr.flush()
        return
    stream.write(data)
    stream.flush()


def compute_build_id(
    salt: Sequence[str] = (),
    config: Optional[ToolchainConfig] = None,
    settings: Optional[Settings] = None,
    runner: Optional[ProbeRunner] = None,
    profile: Optional[ProbeProfile] = None,
    debug_stream: Optional[BinaryIO] = None,
) -> Fingerprint:
    """
    Compute the toolchain fingerprint.

    Parameters
    ----------
    salt : sequence of str
        Extra tokens mixed into the preimage.
    config : ToolchainConfig, optional
        Defaults to ``ToolchainConfig.from_environ()``.
    settings : Settings, optional
        Defaults to ``Settings()`` (read from the environment).
    runner : ProbeRunner, optional
        Defaults to ``SubprocessProbeRunner()``.
    profile : ProbeProfile, optional
        Defaults to ``ProbeProfile.v1()``.
    debug_stream : binary stream, optional
        Target of the preimage echo.  Defaults to stderr.

    Raises
    ------
    DigestError
        If the configured external digest command fails.
    """
    if config is None:
        config = ToolchainConfig.from_environ()
    if settings is None:
        settings = Settings()
    if runner is None:
        runner = SubprocessProbeRunner()

    salt = list(salt)
    preimage = build_preimage(config, salt, runner, profile)
    data = preimage.to_bytes()

    if settings.debug_enabled:
        _echo_preimage(data, debug_stream)

    digest = sha256_hex(data, settings.SHA256SUM)
    logger.info("build id %s (%d preimage bytes)", digest, len(data))

    return Fingerprint(digest=digest, salt=salt, preimage=preimage)


# ── CLI ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point: ``build-id [SALT ...]``."""
    if argv is None:
        argv = sys.argv[1:]

    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not settings.log_level_known:
        logger.warning("unknown BUILD_ID_LOG_LEVEL %r, using WARNING", settings.BUILD_ID_LOG_LEVEL)

    config = ToolchainConfig.from_environ(os.environ)
    try:
        fingerprint = compute_build_id(argv, config=config, settings=settings)
    except DigestError as e:
        logger.error("digest failed: %s", e)
        return 1

    sys.stdout.write(fingerprint.digest + "\n")
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
