"""
Configuration — fingerprint inputs and runtime settings.

Two layers:
  - ``ToolchainConfig``: the values that flow into the preimage
    (compilers, flags, binutils, prefixed binutils variables).
  - ``Settings``: runtime knobs that never touch the preimage
    (debug echo, external digest command, log level).
"""
import logging
import os
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Tools whose ``<TOOL>_*`` environment variables are captured as a group.
PREFIXED_TOOLS = ("AR", "NM", "RANLIB", "STRIP")


class ToolchainConfig(BaseModel):
    """Toolchain inputs, read once at startup."""

    model_config = ConfigDict(frozen=True)

    # Compilers
    CC: str = ""
    CXX: str = ""
    C_STANDARD: str = ""
    CXX_STANDARD: str = ""

    # Flags
    CPPFLAGS: str = ""
    CFLAGS: str = ""
    CXXFLAGS: str = ""
    LDFLAGS: str = ""

    # Binutils
    AR: str = ""
    NM: str = ""
    RANLIB: str = ""
    STRIP: str = ""

    LTO: str = ""

    # Prefixed groups, e.g. AR_VARS = {"AR_FLAGS": "rcs"}
    AR_VARS: Dict[str, str] = Field(default_factory=dict)
    NM_VARS: Dict[str, str] = Field(default_factory=dict)
    RANLIB_VARS: Dict[str, str] = Field(default_factory=dict)
    STRIP_VARS: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "ToolchainConfig":
        """Populate from *environ* (defaults to ``os.environ``)."""
        if environ is None:
            environ = os.environ

        values: Dict[str, object] = {}
        for name in cls.model_fields:
            if name.endswith("_VARS"):
                continue
            values[name] = environ.get(name, "")

        for tool in PREFIXED_TOOLS:
            prefix = f"{tool}_"
            values[f"{tool}_VARS"] = {
                k: v for k, v in environ.items() if k.startswith(prefix)
            }

        return cls(**values)

    def tool_command(self, tool: str) -> str:
        """Configured command for one of ``PREFIXED_TOOLS``."""
        return getattr(self, tool)

    def prefixed_vars(self, tool: str) -> List[Tuple[str, str]]:
        """``(name, value)`` pairs of the ``<tool>_*`` group, sorted by name."""
        group: Dict[str, str] = getattr(self, f"{tool}_VARS")
        return sorted(group.items())


class Settings(BaseSettings):
    """Runtime settings"""

    model_config = SettingsConfigDict(case_sensitive=True)

    # Echo the preimage to stderr when non-empty
    DEBUG: str = ""

    # External digest command (e.g. "sha256sum"); empty => hashlib
    SHA256SUM: str = ""

    # Unknown names fall back to WARNING, see log_level
    BUILD_ID_LOG_LEVEL: str = "WARNING"

    @property
    def debug_enabled(self) -> bool:
        return bool(self.DEBUG)

    @property
    def log_level_known(self) -> bool:
        return isinstance(logging.getLevelName(self.BUILD_ID_LOG_LEVEL.strip().upper()), int)

    @property
    def log_level(self) -> int:
        """Numeric level for ``BUILD_ID_LOG_LEVEL``; WARNING if unrecognized."""
        if not self.log_level_known:
            return logging.WARNING
        return logging.getLevelName(self.BUILD_ID_LOG_LEVEL.strip().upper())
