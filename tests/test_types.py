"""Tests for the arch and package type enumerations."""

import pytest

from nebraska_provider.api.types import (
    VALID_ARCHES,
    VALID_PACKAGE_TYPES,
    Arch,
    PackageType,
    arch_name,
)
from nebraska_provider.core.errors import InvalidAttributeError


def test_arch_codes():
    """Test the wire codes of every architecture."""
    assert int(Arch.from_string("all")) == 0
    assert int(Arch.from_string("amd64")) == 1
    assert int(Arch.from_string("aarch64")) == 2
    assert int(Arch.from_string("x86")) == 3


def test_arch_names_are_a_bijection():
    """Every name maps to a code that maps back to the same name."""
    for name in VALID_ARCHES:
        assert arch_name(int(Arch.from_string(name))) == name
        assert str(Arch.from_string(name)) == name


def test_arch_invalid():
    """Test unknown architecture names and codes."""
    with pytest.raises(InvalidAttributeError, match="invalid/unsupported arch"):
        Arch.from_string("riscv")

    with pytest.raises(InvalidAttributeError):
        arch_name(7)


def test_package_type_codes():
    """Test the wire codes of every package type."""
    assert int(PackageType.from_string("flatcar")) == 1
    assert int(PackageType.from_string("docker")) == 2
    assert int(PackageType.from_string("rkt")) == 3
    assert int(PackageType.from_string("other")) == 4


def test_package_type_round_trip():
    """Reading a written code returns the original name."""
    for name in VALID_PACKAGE_TYPES:
        code = int(PackageType.from_string(name))
        assert PackageType.name_for_code(code) == name


def test_package_type_zero_reads_as_flatcar():
    """An unset type reads back as flatcar."""
    assert PackageType.name_for_code(0) == "flatcar"


def test_package_type_invalid():
    """git is not a server-side package type."""
    with pytest.raises(InvalidAttributeError):
        PackageType.from_string("git")

    with pytest.raises(InvalidAttributeError):
        PackageType.name_for_code(9)
