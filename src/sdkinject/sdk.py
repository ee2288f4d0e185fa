"""Mobile Center SDK modules and the code each language needs to start them."""

from __future__ import annotations

import re
from enum import Flag

from sdkinject.rules import Injection

SDK_NAME = "MobileCenter"

_SWIFT_START_CALL = re.compile(
    r"MSMobileCenter\.start\s*\(\s*\"[^\"\r\n]*\"\s*,\s*withServices:[^)]*\)"
)
_OBJC_START_CALL = re.compile(
    r"\[\s*MSMobileCenter\s+start\s*:[\s\S]+?withServices[\s\S]+?\]\s*\]\s*;"
)


class SdkModule(Flag):
    NONE = 0
    ANALYTICS = 1
    CRASHES = 2
    DISTRIBUTE = 4
    ALL = ANALYTICS | CRASHES | DISTRIBUTE


# Order matters: imports, pods and services are emitted in this order
_MODULE_NAMES: tuple[tuple[SdkModule, str], ...] = (
    (SdkModule.ANALYTICS, "Analytics"),
    (SdkModule.CRASHES, "Crashes"),
    (SdkModule.DISTRIBUTE, "Distribute"),
)


def parse_modules(names: list[str]) -> SdkModule:
    """Combine module names (case-insensitive) into a flag."""
    known = {name.lower(): module for module, name in _MODULE_NAMES}
    result = SdkModule.NONE
    for name in names:
        module = known.get(name.strip().lower())
        if module is None:
            raise ValueError(f"unknown SDK module: {name!r}")
        result |= module
    return result


def module_names(modules: SdkModule) -> list[str]:
    return [name for module, name in _MODULE_NAMES if module in modules]


def pod_names(modules: SdkModule) -> list[str]:
    return [f"{SDK_NAME}/{SDK_NAME}{name}" for name in module_names(modules)]


def import_names(modules: SdkModule) -> list[str]:
    return [SDK_NAME, *(f"{SDK_NAME}{name}" for name in module_names(modules))]


def swift_injection(app_secret: str, modules: SdkModule, indent: str | None = None) -> Injection:
    services = ", ".join(f"MS{name}.self" for name in module_names(modules))
    return Injection(
        imports=tuple(import_names(modules)),
        import_template="import {}",
        call=f'MSMobileCenter.start("{app_secret}", withServices: [{services}])',
        call_pattern=_SWIFT_START_CALL,
        indent=" " * 8 if indent is None else indent,
    )


def objc_injection(app_secret: str, modules: SdkModule, indent: str | None = None) -> Injection:
    services = ", ".join(f"[MS{name} class]" for name in module_names(modules))
    return Injection(
        imports=tuple(import_names(modules)),
        import_template="@import {};",
        call=f'[MSMobileCenter start:@"{app_secret}" withServices:@[{services}]];',
        call_pattern=_OBJC_START_CALL,
        indent=" " * 4 if indent is None else indent,
    )
