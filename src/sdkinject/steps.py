"""Integration steps run in order against a shared context.

Steps only analyse and queue WriteActions; nothing touches the filesystem
until every step has succeeded and `apply_actions` is called.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path

from sdkinject import make_injection, rules, rules_for
from sdkinject.errors import DiscoveryError
from sdkinject.podfile import add_pod, default_podfile, remove_pod
from sdkinject.project import XcodeProject, find_project
from sdkinject.rules import InjectBag
from sdkinject.sdk import SdkModule, pod_names
from sdkinject.text import read_source, write_source


@dataclass(frozen=True, slots=True)
class WriteAction:
    """A deferred file write."""

    path: Path
    original: str | None  # None when the file does not exist yet
    content: str

    @property
    def changed(self) -> bool:
        return self.original != self.content

    def apply(self) -> None:
        if self.changed:
            write_source(self.path, self.content)

    def diff(self) -> str:
        before = (self.original or "").splitlines(keepends=True)
        after = self.content.splitlines(keepends=True)
        label = str(self.path)
        return "".join(
            difflib.unified_diff(
                before,
                after,
                fromfile="/dev/null" if self.original is None else label,
                tofile=label,
            )
        )


@dataclass
class StepContext:
    """State carried through the steps."""

    root: Path
    app_secret: str
    modules: SdkModule
    remove: bool = False
    indent: str | None = None
    actions: list[WriteAction] = field(default_factory=list)
    project: XcodeProject | None = None
    app_delegate_source: str = ""
    app_delegate_bag: InjectBag | None = None

    def require_project(self) -> XcodeProject:
        if self.project is None:
            raise DiscoveryError("project paths have not been discovered")
        return self.project


class Step:
    """One stage of the integration."""

    def run(self, ctx: StepContext) -> None:
        raise NotImplementedError


class FindProjectPaths(Step):
    def run(self, ctx: StepContext) -> None:
        ctx.project = find_project(ctx.root)


class EditPodfile(Step):
    """Add or remove the SDK pods in the project's target block."""

    def run(self, ctx: StepContext) -> None:
        project = ctx.require_project()
        podfile = project.podfile
        original = read_source(podfile) if podfile.is_file() else None

        content = original if original is not None else default_podfile(project.name)
        for pod in pod_names(ctx.modules):
            if ctx.remove:
                content = remove_pod(content, project.name, pod)
            else:
                content = add_pod(content, project.name, pod)

        # Removing from a project without a Podfile must not create one
        if original is None and ctx.remove:
            return
        ctx.actions.append(WriteAction(podfile, original, content))


class InsertSdkInAppDelegate(Step):
    """Scan the AppDelegate and splice in (or out) the SDK start code."""

    def run(self, ctx: StepContext) -> None:
        path = ctx.require_project().app_delegate
        found = rules_for(path.name)
        if found is None:
            raise DiscoveryError(f"unsupported AppDelegate file: {path}")
        rule_set = found[0]

        injection = make_injection(path.name, ctx.app_secret, ctx.modules, ctx.indent)
        source = read_source(path)
        bag = rule_set.analyze(source, injection)
        ctx.app_delegate_source = source
        ctx.app_delegate_bag = bag

        if ctx.remove:
            content = rules.remove_sdk(source, bag, injection)
        else:
            content = rules.insert_sdk(source, bag, injection, path.name, rule_set.TYPE_LABEL)
        ctx.actions.append(WriteAction(path, source, content))


DEFAULT_STEPS: tuple[type[Step], ...] = (FindProjectPaths, EditPodfile, InsertSdkInAppDelegate)


def run_steps(ctx: StepContext, steps: tuple[type[Step], ...] = DEFAULT_STEPS) -> list[WriteAction]:
    """Run every step in order and return the queued actions (not yet applied).

    An exception from any step propagates before any action is applied.
    """
    for step in steps:
        step().run(ctx)
    return ctx.actions


def apply_actions(actions: list[WriteAction]) -> list[WriteAction]:
    """Write every changed file; return the actions that wrote."""
    written = []
    for action in actions:
        if action.changed:
            action.apply()
            written.append(action)
    return written
