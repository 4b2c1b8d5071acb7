"""
build_id — toolchain fingerprint for dependency-build caches.

Probes the configured compilers, linkers and binutils, assembles a
labeled preimage from their version output and reduces it to a single
SHA-256 hex digest.  Same machine + same inputs => same id.
"""

__version__ = "0.1.0"
PREIMAGE_FORMAT = "1"
