"""Tests for critical/warning classification."""

import pytest

from worm_scan.matcher import scan
from worm_scan.models import Finding, FindingLevel, InstalledPackage


def installed(*pairs):
    return [InstalledPackage(name, version) for name, version in pairs]


def advisories(**mapping):
    return {name: frozenset(versions) for name, versions in mapping.items()}


def test_exact_match_is_critical():
    findings = scan(installed(("evil", "1.2.3")), advisories(evil=["1.2.3"]))
    assert findings == [Finding(FindingLevel.CRITICAL, "evil", "1.2.3", "1.2.3")]


@pytest.mark.parametrize("version", ["2.5.6", "2.5.8"])
def test_adjacent_patch_is_warning(version):
    findings = scan(installed(("pkg", version)), advisories(pkg=["2.5.7"]), patch_distance=1)
    assert findings == [Finding(FindingLevel.WARNING, "pkg", version, "2.5.7")]


def test_patch_distance_outside_threshold_is_clean():
    assert scan(installed(("pkg", "2.5.9")), advisories(pkg=["2.5.7"]), patch_distance=1) == []


def test_larger_threshold_widens_warnings():
    findings = scan(installed(("pkg", "2.5.9")), advisories(pkg=["2.5.7"]), patch_distance=2)
    assert [f.level for f in findings] == [FindingLevel.WARNING]


def test_zero_threshold_only_reports_exact_matches():
    assert scan(installed(("pkg", "2.5.8")), advisories(pkg=["2.5.7"]), patch_distance=0) == []


@pytest.mark.parametrize("bad", [-1, None, "abc", 1.5, True])
def test_invalid_threshold_defaults_to_one(bad):
    findings = scan(installed(("pkg", "2.5.8")), advisories(pkg=["2.5.7"]), patch_distance=bad)
    assert len(findings) == 1
    assert scan(installed(("pkg", "2.5.9")), advisories(pkg=["2.5.7"]), patch_distance=bad) == []


def test_major_or_minor_difference_is_clean():
    pkgs = installed(("pkg", "3.5.7"), ("pkg", "2.6.7"))
    assert scan(pkgs, advisories(pkg=["2.5.7"])) == []


def test_absent_package_never_matches():
    assert scan(installed(("safe", "1.2.3")), advisories(evil=["1.2.3"])) == []


def test_unparsable_installed_version_only_matches_exactly():
    assert scan(installed(("evil", "latest")), advisories(evil=["1.2.3", "latest-1"])) == []
    findings = scan(installed(("evil", "latest")), advisories(evil=["latest"]))
    assert findings == [Finding(FindingLevel.CRITICAL, "evil", "latest", "latest")]


def test_build_suffix_without_prerelease_only_matches_exactly():
    assert scan(installed(("pkg", "1.0.1+sha")), advisories(pkg=["1.0.0", "1.0.2"])) == []
    findings = scan(installed(("pkg", "1.0.1+sha")), advisories(pkg=["1.0.1+sha"]))
    assert findings == [Finding(FindingLevel.CRITICAL, "pkg", "1.0.1+sha", "1.0.1+sha")]


def test_unparsable_advisory_versions_are_skipped_for_warnings():
    findings = scan(installed(("pkg", "1.0.1")), advisories(pkg=["garbage", "1.0.0"]))
    assert findings == [Finding(FindingLevel.WARNING, "pkg", "1.0.1", "1.0.0")]


def test_different_string_form_is_not_critical():
    findings = scan(installed(("pkg", "v1.0.0")), advisories(pkg=["1.0.0"]))
    assert findings == [Finding(FindingLevel.WARNING, "pkg", "v1.0.0", "1.0.0")]


def test_tie_break_picks_lowest_qualifying_version():
    findings = scan(installed(("pkg", "1.0.5")), advisories(pkg=["1.0.6", "1.0.4", "9.9.9"]))
    assert findings == [Finding(FindingLevel.WARNING, "pkg", "1.0.5", "1.0.4")]


def test_one_finding_per_installed_package():
    findings = scan(installed(("pkg", "1.0.5")), advisories(pkg=["1.0.5", "1.0.4", "1.0.6"]))
    assert findings == [Finding(FindingLevel.CRITICAL, "pkg", "1.0.5", "1.0.5")]


def test_findings_are_ordered_critical_then_name_then_version():
    pkgs = installed(
        ("zeta", "1.0.1"),
        ("alpha", "2.0.10"),
        ("alpha", "2.0.9"),
        ("beta", "1.0.0"),
        ("alpha", "1.0.0"),
    )
    adv = advisories(
        zeta=["1.0.1"],
        alpha=["2.0.10", "2.0.9", "1.0.1"],
        beta=["1.0.1"],
    )
    findings = scan(pkgs, adv)
    assert [(f.level.value, f.name, f.version) for f in findings] == [
        ("critical", "alpha", "2.0.9"),
        ("critical", "alpha", "2.0.10"),
        ("critical", "zeta", "1.0.1"),
        ("warning", "alpha", "1.0.0"),
        ("warning", "beta", "1.0.0"),
    ]


def test_scan_does_not_mutate_inputs():
    pkgs = installed(("evil", "1.2.3"))
    adv = advisories(evil=["1.2.3"])
    scan(pkgs, adv)
    assert pkgs == installed(("evil", "1.2.3"))
    assert adv == advisories(evil=["1.2.3"])
