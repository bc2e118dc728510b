from __future__ import annotations

"""Wire enumerations used by the Nebraska API.

Architectures and package types travel as small integers; the provider
exposes their lowercase names. Both tables are fixed bijections.
"""

from enum import IntEnum

from nebraska_provider.core.errors import InvalidAttributeError


class Arch(IntEnum):
    """Package/channel architecture."""

    ALL = 0
    AMD64 = 1
    AARCH64 = 2
    X86 = 3

    def __str__(self) -> str:
        return ARCH_NAMES[self]

    @classmethod
    def from_string(cls, value: str) -> Arch:
        """Parse an architecture name.

        Raises:
            InvalidAttributeError: If the name is not a known architecture
        """
        for arch, name in ARCH_NAMES.items():
            if name == value:
                return arch
        raise InvalidAttributeError(
            "arch", f"nebraska: invalid/unsupported arch {value!r}, must be one of {VALID_ARCHES}"
        )


ARCH_NAMES = {
    Arch.ALL: "all",
    Arch.AMD64: "amd64",
    Arch.AARCH64: "aarch64",
    Arch.X86: "x86",
}

VALID_ARCHES = list(ARCH_NAMES.values())


def arch_name(code: int) -> str:
    """Name of an architecture code read back from the server."""
    try:
        return ARCH_NAMES[Arch(code)]
    except ValueError:
        raise InvalidAttributeError("arch", f"nebraska: unknown arch code {code}") from None


# Index i holds the name of package type code i + 1.
VALID_PACKAGE_TYPES = ["flatcar", "docker", "rkt", "other"]

# Client-side pseudo type stored on the server as "other".
GIT_PACKAGE_TYPE = "git"


class PackageType(IntEnum):
    """Package type as stored by Nebraska."""

    FLATCAR = 1
    DOCKER = 2
    RKT = 3
    OTHER = 4

    def __str__(self) -> str:
        return VALID_PACKAGE_TYPES[self.value - 1]

    @classmethod
    def from_string(cls, value: str) -> PackageType:
        """Parse a package type name.

        Raises:
            InvalidAttributeError: If the name is not a server-side package type
        """
        try:
            return cls(VALID_PACKAGE_TYPES.index(value) + 1)
        except ValueError:
            raise InvalidAttributeError(
                "type", f"nebraska: invalid/unsupported package type {value!r}"
            ) from None

    @classmethod
    def name_for_code(cls, code: int) -> str:
        """Name for a package type code read back from the server.

        Code 0 is the zero value of an unset type and reads as "flatcar".
        """
        if code == 0:
            return str(cls.FLATCAR)
        try:
            return str(cls(code))
        except ValueError:
            raise InvalidAttributeError(
                "type", f"nebraska: unknown package type code {code}"
            ) from None
