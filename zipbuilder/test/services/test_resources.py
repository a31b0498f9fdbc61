from __future__ import annotations

from pathlib import Path

from zipbuilder.core.result import Err, Ok
from zipbuilder.services.errors import BundleCollision, RelocationFailed
from zipbuilder.services.resources import find_bundles, move_all_bundles, relocate_resources


def _touch(path: Path, content: str = "x") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _release_tree(root: Path) -> Path:
    fb = root / "Firebase"
    analytics = fb / "FirebaseAnalytics"
    _touch(
        analytics
        / "FirebaseAnalytics.xcframework"
        / "ios-arm64"
        / "FirebaseAnalytics.framework"
        / "FirebaseAnalytics_Privacy.bundle"
        / "PrivacyInfo.xcprivacy"
    )
    _touch(analytics / "GoogleAppMeasurement.xcframework" / "GAM.bundle" / "Info.plist")
    _touch(fb / "FirebaseFirestore" / "gRPC.xcframework" / "gRPCCertificates.bundle" / "roots.pem")
    _touch(fb / "README.md")
    return fb


def test_find_bundles_does_not_descend_into_bundles(tmp_path: Path) -> None:
    outer = tmp_path / "A.xcframework" / "Outer.bundle"
    _touch(outer / "Inner.bundle" / "file")

    assert find_bundles(tmp_path) == [outer]


def test_move_all_bundles_flattens_into_resources(tmp_path: Path) -> None:
    fb = _release_tree(tmp_path)
    analytics = fb / "FirebaseAnalytics"
    resources = analytics / "Resources"

    result = move_all_bundles(analytics, resources)

    assert isinstance(result, Ok)
    assert sorted(p.name for p in result.value) == [
        "FirebaseAnalytics_Privacy.bundle",
        "GAM.bundle",
    ]
    assert (resources / "GAM.bundle" / "Info.plist").exists()
    assert find_bundles(analytics, exclude=resources) == []


def test_move_all_bundles_without_bundles_creates_nothing(tmp_path: Path) -> None:
    product = tmp_path / "FirebaseCore"
    _touch(product / "FirebaseCore.xcframework" / "Info.plist")

    result = move_all_bundles(product, product / "Resources")

    assert result == Ok([])
    assert not (product / "Resources").exists()


def test_move_all_bundles_is_rerunnable(tmp_path: Path) -> None:
    fb = _release_tree(tmp_path)
    analytics = fb / "FirebaseAnalytics"

    assert isinstance(move_all_bundles(analytics, analytics / "Resources"), Ok)
    second = move_all_bundles(analytics, analytics / "Resources")

    assert second == Ok([])


def test_duplicate_bundle_names_are_rejected_before_moving(tmp_path: Path) -> None:
    product = tmp_path / "FirebaseStorage"
    first = product / "A.xcframework" / "ios-arm64" / "Shared.bundle"
    second = product / "A.xcframework" / "ios-x86_64-simulator" / "Shared.bundle"
    _touch(first / "a")
    _touch(second / "b")

    result = move_all_bundles(product, product / "Resources")

    assert isinstance(result, Err)
    assert isinstance(result.error, BundleCollision)
    assert result.error.destination == product / "Resources" / "Shared.bundle"
    assert result.error.sources == (first, second)
    assert first.exists()
    assert second.exists()


def test_collision_with_existing_resource(tmp_path: Path) -> None:
    product = tmp_path / "FirebaseML"
    _touch(product / "Resources" / "Model.bundle" / "a")
    _touch(product / "ML.xcframework" / "Model.bundle" / "b")

    result = move_all_bundles(product, product / "Resources")

    assert isinstance(result, Err)
    assert isinstance(result.error, BundleCollision)


def test_relocate_resources_preserves_bundle_count(tmp_path: Path) -> None:
    fb = _release_tree(tmp_path)
    before = len(find_bundles(fb))

    result = relocate_resources(fb)

    assert result == Ok(before)
    assert before == 3
    for product in ("FirebaseAnalytics", "FirebaseFirestore"):
        resources = fb / product / "Resources"
        assert find_bundles(fb / product, exclude=resources) == []
    assert sorted(p.name for p in (fb / "FirebaseAnalytics" / "Resources").iterdir()) == [
        "FirebaseAnalytics_Privacy.bundle",
        "GAM.bundle",
    ]
    assert [p.name for p in (fb / "FirebaseFirestore" / "Resources").iterdir()] == [
        "gRPCCertificates.bundle"
    ]


def test_relocate_resources_skips_top_level_files(tmp_path: Path) -> None:
    fb = _release_tree(tmp_path)

    assert isinstance(relocate_resources(fb), Ok)
    assert (fb / "README.md").is_file()
    assert not (fb / "Resources").exists()


def test_relocate_resources_missing_root(tmp_path: Path) -> None:
    result = relocate_resources(tmp_path / "missing")

    assert isinstance(result, Err)
    assert isinstance(result.error, RelocationFailed)
