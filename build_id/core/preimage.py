"""
Preimage builder — the fingerprint procedure proper.

Sequence (order is part of the contract; reordering would look like a
toolchain change and invalidate every cache):

  salt → flags → cc → cxx → lld → mold → ar → nm → ranlib → strip → lto

Each probe goes through the injected ``ProbeRunner`` and runs to
completion before the next one starts.
"""
import logging
from typing import Optional, Sequence

from build_id.config import ToolchainConfig
from build_id.core.probe import ProbeRunner
from build_id.io.schema import Preimage, Section
from build_id.policy.profile import ProbeProfile

logger = logging.getLogger(__name__)


def _compiler_section(
    section: Section,
    command: str,
    languages: Sequence[str],
    standard_name: str,
    standard_value: str,
    runner: ProbeRunner,
    profile: ProbeProfile,
) -> None:
    section.add(runner.run(command, profile.banner_args))
    for language in languages:
        section.add(runner.run(command, profile.preprocess_args(language)))
    section.add_line(f"{standard_name}={standard_value}")


def build_preimage(
    config: ToolchainConfig,
    salt: Sequence[str],
    runner: ProbeRunner,
    profile: Optional[ProbeProfile] = None,
) -> Preimage:
    """
    Assemble the preimage for *config* and *salt*.

    Parameters
    ----------
    config : ToolchainConfig
        Toolchain inputs.
    salt : sequence of str
        Extra tokens, order-significant, joined by single spaces.
    runner : ProbeRunner
        Executes the tool probes.  Failures come back as text.
    profile : ProbeProfile, optional
        Probe layout.  Defaults to ProbeProfile.v1().

    Returns
    -------
    Preimage
    """
    if profile is None:
        profile = ProbeProfile.v1()

    pre = Preimage(profile_id=profile.profile_id, root_label=profile.root_label)

    # ── salt ─────────────────────────────────────────────────────────
    pre.section("salt").add_line(" ".join(salt))

    # ── flags ────────────────────────────────────────────────────────
    flags = pre.section("flags")
    for name in profile.flag_names:
        flags.add_line(f"{name}={getattr(config, name)}")

    # ── compilers ────────────────────────────────────────────────────
    logger.debug("probing C compiler %r", config.CC)
    _compiler_section(
        pre.section("cc"), config.CC, profile.c_languages,
        "C_STANDARD", config.C_STANDARD, runner, profile,
    )
    logger.debug("probing C++ compiler %r", config.CXX)
    _compiler_section(
        pre.section("cxx"), config.CXX, profile.cxx_languages,
        "CXX_STANDARD", config.CXX_STANDARD, runner, profile,
    )

    # ── linkers ──────────────────────────────────────────────────────
    pre.section("lld").add(runner.run(profile.lld_command, profile.version_args))
    pre.section("mold").add(runner.run(profile.mold_command, profile.version_args))

    # ── binutils ─────────────────────────────────────────────────────
    for label, tool in profile.binutils:
        section = pre.section(label)
        section.add(runner.run(config.tool_command(tool), profile.version_args))
        for name, value in config.prefixed_vars(tool):
            section.add_line(f"{name}={value}")

    # ── lto ──────────────────────────────────────────────────────────
    pre.section("lto").add_line(f"LTO={config.LTO}")

    return pre
