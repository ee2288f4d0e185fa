"""Shared test fixtures and helpers."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from sdkinject.rules import Injection
from sdkinject.scanner import C_QUOTES, trace

SWIFT_APP_DELEGATE = """\
import UIKit

@UIApplicationMain
class AppDelegate: UIResponder, UIApplicationDelegate {

    var window: UIWindow?

    func application(_ application: UIApplication, didFinishLaunchingWithOptions launchOptions: [UIApplicationLaunchOptionsKey: Any]?) -> Bool {
        // Override point for customization after application launch.
        return true
    }

    func applicationWillResignActive(_ application: UIApplication) {
    }
}
"""

OBJC_APP_DELEGATE = """\
#import "AppDelegate.h"

@interface AppDelegate ()

@end

@implementation AppDelegate


- (BOOL)application:(UIApplication *)application didFinishLaunchingWithOptions:(NSDictionary *)launchOptions {
    // Override point for customization after application launch.
    return YES;
}


- (void)applicationWillResignActive:(UIApplication *)application {
}

@end
"""


@pytest.fixture
def swift_source() -> str:
    return SWIFT_APP_DELEGATE


@pytest.fixture
def objc_source() -> str:
    return OBJC_APP_DELEGATE


@pytest.fixture
def bar_injection() -> Injection:
    """A small injection: `import Bar` and `Bar.start()` indented by two spaces."""
    return Injection(
        imports=("Bar",),
        import_template="import {}",
        call="Bar.start()",
        call_pattern=re.compile(r"Bar\.start\([^)]*\)"),
        indent="  ",
    )


@pytest.fixture
def significance():
    """Return a helper mapping source to the significance flag at each offset."""

    def _significance(source: str, quotes: str = C_QUOTES) -> list[bool]:
        return [significant for significant, _ in trace(source, quotes)]

    return _significance


@pytest.fixture
def depths():
    """Return a helper mapping source to the block level at each offset."""

    def _depths(source: str, quotes: str = C_QUOTES) -> list[int]:
        return [level for _, level in trace(source, quotes)]

    return _depths


@pytest.fixture
def ios_project(tmp_path: Path):
    """Return a factory building an Xcode application tree under tmp_path."""

    def _make(
        language: str = "swift",
        name: str = "MyApp",
        podfile: str | None = None,
        app_delegate: str | None = None,
    ) -> Path:
        root = tmp_path / "repo"
        xcodeproj = root / f"{name}.xcodeproj"
        xcodeproj.mkdir(parents=True)
        (xcodeproj / "project.pbxproj").write_text("// !$*UTF8*$!\n{\n}\n")
        files = root / name
        files.mkdir()
        if language == "swift":
            (files / "AppDelegate.swift").write_text(app_delegate or SWIFT_APP_DELEGATE)
        else:
            (files / "AppDelegate.m").write_text(app_delegate or OBJC_APP_DELEGATE)
        if podfile is not None:
            (root / "Podfile").write_text(podfile)
        return root

    return _make
