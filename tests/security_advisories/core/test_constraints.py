from __future__ import annotations

import pytest

from security_advisories.core.constraints import (
    is_acceptable_version_constraint,
    is_lower_bound,
    is_upper_bound,
    is_valid_branch_name,
    parse_constraint,
    parse_constraints,
    parse_version,
    satisfies_all,
)
from security_advisories.core.domain.errors import ConstraintError


@pytest.mark.parametrize("name", ["master", "7.4", "2.1.x", "3.0-dev", "1.0.0", "2.x"])
def test_branch_name_accepts(name):
    assert is_valid_branch_name(name)


@pytest.mark.parametrize("name", ["v1", "main", "1_0", "", "1.0-beta", 1.0])
def test_branch_name_rejects(name):
    assert not is_valid_branch_name(name)


@pytest.mark.parametrize("value", [">=1.2.3", "<2.0.0-beta1", "<=0.9", ">1.0.0-rc12", "<1", ">=0.0.1-alpha1"])
def test_constraint_format_accepts(value):
    assert is_acceptable_version_constraint(value)


@pytest.mark.parametrize(
    "value",
    ["=1.0", "1.0", "<=", "<01.0", "<1.0-beta", "<1.0-beta0", "<1.0.0-dev1", ">= 1.0", "<1.0.x", None, 2],
)
def test_constraint_format_rejects(value):
    assert not is_acceptable_version_constraint(value)


def test_constraint_format_ignores_ordering():
    # only the shape matters
    assert is_acceptable_version_constraint(">=9.0")
    assert is_acceptable_version_constraint("<0.1")


def test_bound_classification():
    assert is_upper_bound("<2.0") and is_upper_bound("<=2.0")
    assert is_lower_bound(">1.0") and is_lower_bound(">=1.0")
    assert not is_upper_bound(">=1.0")
    assert not is_lower_bound("=1.0")
    assert not is_upper_bound(None)


def test_parse_version_handles_v_prefix_and_dev_branches():
    assert parse_version("v1.2.3") == parse_version("1.2.3")
    assert parse_version("dev-master") is None
    assert parse_version("1.x-dev") is None


def test_prerelease_ordering():
    order = ["2.0.0-alpha1", "2.0.0-beta1", "2.0.0-beta2", "2.0.0-rc1", "2.0.0"]
    parsed = [parse_version(v) for v in order]
    assert parsed == sorted(parsed)


def test_numeric_not_lexical_ordering():
    constraints = parse_constraint("<1.10.0")
    assert satisfies_all(parse_version("1.9.0"), constraints)
    assert not satisfies_all(parse_version("1.10.0"), constraints)


def test_upper_bound_excludes_prereleases_of_bound():
    constraints = parse_constraint("<2.0.0")
    assert not satisfies_all(parse_version("2.0.0-beta1"), constraints)
    assert satisfies_all(parse_version("1.9.9"), constraints)


def test_lower_bound_includes_prereleases_of_bound():
    constraints = parse_constraint(">=2.0.0")
    assert satisfies_all(parse_version("2.0.0-rc1"), constraints)
    assert not satisfies_all(parse_version("1.9.9"), constraints)


def test_prerelease_bound_compares_directly():
    constraints = parse_constraint("<2.0.0-beta2")
    assert satisfies_all(parse_version("2.0.0-beta1"), constraints)
    assert not satisfies_all(parse_version("2.0.0-beta2"), constraints)
    assert not satisfies_all(parse_version("2.0.0"), constraints)


def test_inclusive_and_exclusive_bounds():
    assert satisfies_all(parse_version("1.4.2"), parse_constraint("<=1.4.2"))
    assert not satisfies_all(parse_version("1.4.2"), parse_constraint(">1.4.2"))
    assert satisfies_all(parse_version("1.4.3"), parse_constraint(">1.4.2"))


def test_trailing_zero_segments_are_equal():
    assert satisfies_all(parse_version("1.0"), parse_constraint(">=1.0.0"))
    assert satisfies_all(parse_version("1.0.0.0"), parse_constraint("<=1.0"))


def test_space_separated_atoms_are_anded():
    constraints = parse_constraint(">=1.0 <2.0")
    assert len(constraints) == 2
    assert satisfies_all(parse_version("1.5"), constraints)
    assert not satisfies_all(parse_version("2.5"), constraints)


def test_comma_separated_atoms_are_anded():
    assert len(parse_constraint(">=1.0, <2.0")) == 2


def test_equality_operators():
    assert satisfies_all(parse_version("1.2"), parse_constraint("=1.2"))
    assert not satisfies_all(parse_version("1.2"), parse_constraint("!=1.2"))


def test_parse_constraints_flattens_branch_list():
    assert len(parse_constraints([">=1.0", "<2.0"])) == 2


@pytest.mark.parametrize("raw", ["", "   ", "<", "<foo", ">=1.0 <bar"])
def test_parse_constraint_rejects_garbage(raw):
    with pytest.raises(ConstraintError):
        parse_constraint(raw)


@pytest.mark.parametrize("raw", ["2.4.3-p1", "1.0.0-patch1", "1.0.0-pl1", "v2.4.3-P2"])
def test_patch_releases_parse(raw):
    version = parse_version(raw)
    assert version is not None
    assert version.is_postrelease


def test_patch_release_ordering():
    assert parse_version("2.4.3") < parse_version("2.4.3-p1") < parse_version("2.4.3-p2") < parse_version("2.4.4")
    assert parse_version("2.4.4-beta1") > parse_version("2.4.3-p9")


def test_patch_release_bounds():
    assert satisfies_all(parse_version("2.4.3-p1"), parse_constraint("<2.4.4"))
    assert not satisfies_all(parse_version("2.4.3-p1"), parse_constraint("<=2.4.3"))
    assert not satisfies_all(parse_version("2.4.3-p1"), parse_constraint("<2.4.3-p1"))
    assert satisfies_all(parse_version("2.4.3-p2"), parse_constraint(">=2.4.3-p2"))
