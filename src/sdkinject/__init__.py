"""Insert the Mobile Center SDK into an iOS application's AppDelegate."""

from __future__ import annotations

from pathlib import PurePath
from types import ModuleType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sdkinject.rules import Injection
    from sdkinject.sdk import SdkModule

__version__ = "0.1.0"


def rules_for(filename: str) -> tuple[ModuleType, str] | None:
    """Return (rule set module, language) for a source file, or None."""
    from sdkinject import objc, swift

    suffix = PurePath(filename).suffix.lower()
    if suffix == ".swift":
        return swift, "swift"
    if suffix == ".m":
        return objc, "objc"
    return None


def make_injection(
    filename: str,
    app_secret: str,
    modules: SdkModule,
    indent: str | None = None,
) -> Injection:
    """Build the Mobile Center injection matching the file's language."""
    from sdkinject.sdk import objc_injection, swift_injection

    found = rules_for(filename)
    if found is None:
        raise ValueError(f"unsupported AppDelegate file: {filename}")
    factory = swift_injection if found[1] == "swift" else objc_injection
    return factory(app_secret, modules, indent)


def integrate(
    source: str,
    filename: str,
    app_secret: str,
    modules: SdkModule,
    remove: bool = False,
    indent: str | None = None,
) -> str:
    """Add (or remove) the SDK imports and start call in AppDelegate source."""
    found = rules_for(filename)
    if found is None:
        raise ValueError(f"unsupported AppDelegate file: {filename}")
    rule_set = found[0]
    injection = make_injection(filename, app_secret, modules, indent)
    if remove:
        return rule_set.remove_sdk(source, injection)
    return rule_set.insert_sdk(source, injection, PurePath(filename).name)
