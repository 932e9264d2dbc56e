"""
Tool model — a named external dependency and how to get it.

A ToolSpec is static data: presence checks that tell whether the
tool already satisfies the desired end state, per-platform package
names, an optional alternate install action (git clone or remote
script) and the manual instruction used when nothing automated
applies.

Paths may start with ``~`` (the provisioned home directory) or
contain ``{zsh_custom}`` (the oh-my-zsh custom directory); they are
expanded by the provisioning context, never here.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from devboot.core.models.platform import Platform


class PresenceCheck(BaseModel):
    """A side-effect-free "is it already there?" predicate."""

    kind: Literal["binary", "directory", "marker"]
    target: str  # binary name, directory path or file path
    marker: str = ""  # substring searched for when kind == "marker"

    @classmethod
    def binary(cls, name: str) -> PresenceCheck:
        return cls(kind="binary", target=name)

    @classmethod
    def directory(cls, path: str) -> PresenceCheck:
        return cls(kind="directory", target=path)

    @classmethod
    def file_marker(cls, path: str, marker: str) -> PresenceCheck:
        return cls(kind="marker", target=path, marker=marker)


class GitClone(BaseModel):
    """Clone a repository into a fixed directory."""

    kind: Literal["git"] = "git"
    url: str
    target: str
    depth: int | None = None


class RemoteScript(BaseModel):
    """Download a vendor install script and pipe it to a shell.

    ``target`` is the directory the script creates; its existence is
    the reinstall guard.
    """

    kind: Literal["script"] = "script"
    url: str
    target: str
    interpreter: str = "bash"
    env: dict[str, str] = Field(default_factory=dict)


AlternateAction = Annotated[GitClone | RemoteScript, Field(discriminator="kind")]


class ToolSpec(BaseModel):
    """One installable tool."""

    id: str
    label: str
    checks: list[PresenceCheck] = Field(default_factory=list)
    packages: dict[Platform, str] = Field(default_factory=dict)
    alternate: AlternateAction | None = None
    # Platforms the alternate action is used on.  None means "every
    # platform without a package mapping".
    alternate_platforms: list[Platform] | None = None
    # Platforms the tool applies to at all.  None means all of them.
    platforms: list[Platform] | None = None
    manual_hint: str = ""
    version_command: list[str] | None = None
    after_install: str | None = None
    follow_up: str | None = None

    def applies_to(self, platform: Platform) -> bool:
        return self.platforms is None or platform in self.platforms

    def package_for(self, platform: Platform) -> str | None:
        return self.packages.get(platform)

    def alternate_for(self, platform: Platform) -> GitClone | RemoteScript | None:
        if self.alternate is None:
            return None
        if self.alternate_platforms is None:
            return None if platform in self.packages else self.alternate
        return self.alternate if platform in self.alternate_platforms else None

    def manual_instruction(self) -> str:
        return self.manual_hint or f"Install {self.label} using your package manager"
