"""
Semantic test: result bundle placement.

Invariant:
A passed symlink to an .xcresult directory resolves to its target; any
other passed path is used as given; no passed path yields the run's
canonical bundle path. With a remote project handle a passed path is
linked from the canonical location, never overwriting an existing one.
"""

from __future__ import annotations

from selective_testing.runtime.config import Config
from selective_testing.runtime.directories import CacheDirectoriesProvider
from selective_testing.runtime.result_bundle import ResultBundleLocator


def locator(tmp_path) -> ResultBundleLocator:
    return ResultBundleLocator(directories=CacheDirectoriesProvider(tmp_path / "cache"))


def test_symlink_to_bundle_resolves_to_target(tmp_path) -> None:
    bundle = tmp_path / "real" / "Tests.xcresult"
    bundle.mkdir(parents=True)
    link = tmp_path / "latest.xcresult"
    link.symlink_to(bundle, target_is_directory=True)

    resolved = locator(tmp_path).resolve(run_id="r1", passed_path=link, config=Config())

    assert resolved == bundle.resolve()


def test_symlink_to_other_directory_is_kept(tmp_path) -> None:
    target = tmp_path / "real" / "output"
    target.mkdir(parents=True)
    link = tmp_path / "latest"
    link.symlink_to(target, target_is_directory=True)

    resolved = locator(tmp_path).resolve(run_id="r1", passed_path=link, config=Config())

    assert resolved == link


def test_plain_directory_is_used_as_given(tmp_path) -> None:
    bundle = tmp_path / "Tests.xcresult"
    bundle.mkdir()

    resolved = locator(tmp_path).resolve(run_id="r1", passed_path=bundle, config=Config())

    assert resolved == bundle


def test_missing_path_yields_canonical_run_path(tmp_path) -> None:
    resolved = locator(tmp_path).resolve(run_id="r2", passed_path=None, config=Config())

    assert resolved == tmp_path / "cache" / "runs" / "r2" / "result-bundle.xcresult"
    assert resolved.parent.is_dir()


def test_full_handle_links_passed_bundle(tmp_path) -> None:
    bundle = tmp_path / "Tests.xcresult"
    bundle.mkdir()
    bundles = locator(tmp_path)

    bundles.resolve(run_id="r3", passed_path=bundle, config=Config(full_handle="acme/app"))

    link = bundles.run_result_bundle_path("r3")
    assert link.is_symlink()
    assert link.resolve() == bundle.resolve()


def test_existing_run_bundle_is_not_replaced(tmp_path) -> None:
    bundles = locator(tmp_path)
    existing = bundles.run_result_bundle_path("r4")
    existing.mkdir(parents=True)
    bundle = tmp_path / "Tests.xcresult"
    bundle.mkdir()

    bundles.resolve(run_id="r4", passed_path=bundle, config=Config(full_handle="acme/app"))

    assert existing.is_dir()
    assert not existing.is_symlink()


def test_no_link_without_full_handle(tmp_path) -> None:
    bundle = tmp_path / "Tests.xcresult"
    bundle.mkdir()
    bundles = locator(tmp_path)

    bundles.resolve(run_id="r5", passed_path=bundle, config=Config())

    assert not bundles.run_result_bundle_path("r5").exists()
