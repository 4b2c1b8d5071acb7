"""
Profile — which probes run, with which arguments, in which order.

Every knob that shapes the preimage lives here so that the builder in
``core.preimage`` only sequences and labels.  Changing a probe argument
changes every fingerprint, so the profile id is rendered into the
preimage next to the format version.
"""
import os
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ProbeProfile:
    """Probe layout of one preimage format."""

    profile_id: str

    root_label: str = "build-id"

    # Compiler banner (version + configuration)
    banner_args: Tuple[str, ...] = ("-v",)
    # Version query for linkers and binutils
    version_args: Tuple[str, ...] = ("--version",)

    c_languages: Tuple[str, ...] = ("c", "objective-c")
    cxx_languages: Tuple[str, ...] = ("c++", "objective-c++")

    lld_command: str = "ld.lld"
    mold_command: str = "mold"

    flag_names: Tuple[str, ...] = ("CPPFLAGS", "CFLAGS", "CXXFLAGS", "LDFLAGS")

    # (section label, config field), emission order
    binutils: Tuple[Tuple[str, str], ...] = (
        ("ar", "AR"),
        ("nm", "NM"),
        ("ranlib", "RANLIB"),
        ("strip", "STRIP"),
    )

    def preprocess_args(self, language: str) -> Tuple[str, ...]:
        """Preprocess an empty *language* source into the null device, verbosely."""
        return ("-x", language, "-E", "-v", os.devnull, "-o", os.devnull)

    @classmethod
    def v1(cls) -> "ProbeProfile":
        """The single supported profile (preimage format 1)."""
        return cls(profile_id="toolchain-probe-v1")
