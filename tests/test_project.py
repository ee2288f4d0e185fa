"""Tests for Xcode project discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from sdkinject.errors import DiscoveryError
from sdkinject.project import find_project, walk_tree


class TestFindProject:
    def test_swift_project(self, ios_project):
        root = ios_project("swift")
        project = find_project(root)
        assert project.name == "MyApp"
        assert project.project_file == root / "MyApp.xcodeproj" / "project.pbxproj"
        assert project.root_dir == root
        assert project.files_dir == root / "MyApp"
        assert project.app_delegate == root / "MyApp" / "AppDelegate.swift"
        assert project.podfile == root / "Podfile"

    def test_objc_project(self, ios_project):
        project = find_project(ios_project("objc"))
        assert project.app_delegate.name == "AppDelegate.m"

    def test_nested_project(self, tmp_path: Path, ios_project):
        ios_project("swift")
        project = find_project(tmp_path)
        assert project.root_dir == tmp_path / "repo"

    def test_app_delegate_name_case_insensitive(self, tmp_path: Path, ios_project):
        root = ios_project("swift")
        (root / "MyApp" / "AppDelegate.swift").rename(root / "MyApp" / "appdelegate.swift")
        assert find_project(root).app_delegate.name == "appdelegate.swift"

    def test_pods_project_skipped(self, ios_project):
        root = ios_project("swift")
        pods = root / "Pods" / "Pods.xcodeproj"
        pods.mkdir(parents=True)
        (pods / "project.pbxproj").write_text("{}")
        assert find_project(root).name == "MyApp"


class TestDiscoveryErrors:
    def test_no_pbxproj(self, tmp_path: Path):
        with pytest.raises(DiscoveryError, match="no \\*.pbxproj"):
            find_project(tmp_path)

    def test_pbxproj_in_wrong_folder(self, tmp_path: Path):
        (tmp_path / "project.pbxproj").write_text("{}")
        with pytest.raises(DiscoveryError, match="xcodeproj folder"):
            find_project(tmp_path)

    def test_no_project_files_directory(self, tmp_path: Path):
        xcodeproj = tmp_path / "MyApp.xcodeproj"
        xcodeproj.mkdir()
        (xcodeproj / "project.pbxproj").write_text("{}")
        with pytest.raises(DiscoveryError, match="project files directory 'MyApp'"):
            find_project(tmp_path)

    def test_no_app_delegate(self, ios_project):
        root = ios_project("swift")
        (root / "MyApp" / "AppDelegate.swift").unlink()
        with pytest.raises(DiscoveryError, match="no AppDelegate"):
            find_project(root)


class TestWalkTree:
    def test_breadth_first(self, tmp_path: Path):
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "a" / "b" / "target.txt").write_text("deep")
        (tmp_path / "z").mkdir()
        (tmp_path / "z" / "target.txt").write_text("shallow")
        found = walk_tree(tmp_path, lambda p: p if p.name == "target.txt" else None)
        assert found == tmp_path / "z" / "target.txt"

    def test_nothing_found(self, tmp_path: Path):
        assert walk_tree(tmp_path, lambda p: None) is None
