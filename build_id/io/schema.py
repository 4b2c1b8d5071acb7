"""
Schema — Pydantic models for the preimage and the resulting fingerprint.

The preimage is transient: it is rendered, optionally echoed for
inspection, hashed, and dropped.  Only ``Fingerprint.digest`` leaves
the process on stdout.
"""
from typing import List

from pydantic import BaseModel, Field

from build_id import PREIMAGE_FORMAT


class Section(BaseModel):
    """One ``BEGIN <label>`` ... ``END <label>`` block."""
    label: str
    chunks: List[str] = Field(default_factory=list)

    def add(self, text: str) -> "Section":
        self.chunks.append(text)
        return self

    def add_line(self, line: str) -> "Section":
        return self.add(line + "\n")

    def render(self) -> str:
        parts = [f"BEGIN {self.label}\n"]
        for chunk in self.chunks:
            parts.append(chunk)
            # Keep the next line separate when a tool omits its final newline
            if chunk and not chunk.endswith("\n"):
                parts.append("\n")
        parts.append(f"END {self.label}\n")
        return "".join(parts)


class Preimage(BaseModel):
    """
    Ordered sections wrapped in a root block.

    The root block opens with the format and profile id, so changing
    the probe layout changes every fingerprint.
    """
    format: str = PREIMAGE_FORMAT
    profile_id: str = ""
    root_label: str = "build-id"
    sections: List[Section] = Field(default_factory=list)

    def section(self, label: str) -> Section:
        """Append and return a new section."""
        s = Section(label=label)
        self.sections.append(s)
        return s

    def labels(self) -> List[str]:
        return [s.label for s in self.sections]

    def render(self) -> str:
        body = "".join(s.render() for s in self.sections)
        header = f"FORMAT={self.format}\nPROFILE={self.profile_id}\n"
        return f"BEGIN {self.root_label}\n{header}{body}END {self.root_label}\n"

    def to_bytes(self) -> bytes:
        # surrogateescape restores undecodable tool output byte-for-byte
        return self.render().encode("utf-8", errors="surrogateescape")


class Fingerprint(BaseModel):
    """Result of one build-id computation."""
    digest: str
    salt: List[str] = Field(default_factory=list)
    preimage: Preimage
