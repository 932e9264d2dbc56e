"""
L0 Data — Tool registry.

Every tool the provisioner manages, in installation order.  Pure
data, no logic.  Order matters: git comes before anything that is
cloned, and oh-my-zsh must exist before themes and plugins are
cloned into its custom directory.
"""

from __future__ import annotations

from devboot.core.models.platform import Platform
from devboot.core.models.tool import GitClone, PresenceCheck, RemoteScript, ToolSpec

_PM_PLATFORMS = (Platform.MACOS, Platform.DEBIAN, Platform.FEDORA, Platform.ARCH)


def _same_name(package: str) -> dict[Platform, str]:
    """Package mapping for tools named identically on every package manager."""
    return {p: package for p in _PM_PLATFORMS}


TOOL_SPECS: list[ToolSpec] = [

    # ── Prerequisites ───────────────────────────────────────────

    ToolSpec(
        id="git",
        label="git",
        checks=[PresenceCheck.binary("git")],
        packages=_same_name("git"),
    ),

    # ── Shell ───────────────────────────────────────────────────

    ToolSpec(
        id="zsh",
        label="zsh",
        checks=[PresenceCheck.binary("zsh")],
        packages=_same_name("zsh"),
        after_install="set_default_shell",
    ),
    ToolSpec(
        id="oh-my-zsh",
        label="oh-my-zsh",
        checks=[PresenceCheck.directory("~/.oh-my-zsh")],
        alternate=RemoteScript(
            url="https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh",
            target="~/.oh-my-zsh",
            interpreter="sh",
            env={"RUNZSH": "no", "CHSH": "no"},
        ),
    ),
    ToolSpec(
        id="powerlevel10k",
        label="powerlevel10k theme",
        checks=[PresenceCheck.directory("{zsh_custom}/themes/powerlevel10k")],
        alternate=GitClone(
            url="https://github.com/romkatv/powerlevel10k.git",
            target="{zsh_custom}/themes/powerlevel10k",
            depth=1,
        ),
    ),
    ToolSpec(
        id="zsh-syntax-highlighting",
        label="zsh-syntax-highlighting",
        checks=[PresenceCheck.directory("{zsh_custom}/plugins/zsh-syntax-highlighting")],
        alternate=GitClone(
            url="https://github.com/zsh-users/zsh-syntax-highlighting.git",
            target="{zsh_custom}/plugins/zsh-syntax-highlighting",
        ),
    ),
    ToolSpec(
        id="zsh-autosuggestions",
        label="zsh-autosuggestions",
        checks=[PresenceCheck.directory("{zsh_custom}/plugins/zsh-autosuggestions")],
        alternate=GitClone(
            url="https://github.com/zsh-users/zsh-autosuggestions",
            target="{zsh_custom}/plugins/zsh-autosuggestions",
        ),
    ),

    # ── Editor / multiplexer ────────────────────────────────────

    ToolSpec(
        id="fzf",
        label="fzf",
        checks=[PresenceCheck.binary("fzf")],
        packages=_same_name("fzf"),
        alternate=GitClone(
            url="https://github.com/junegunn/fzf.git",
            target="~/.fzf",
            depth=1,
        ),
        after_install="fzf_shell_integration",
    ),
    ToolSpec(
        id="neovim",
        label="neovim",
        checks=[PresenceCheck.binary("nvim")],
        packages=_same_name("neovim"),
        manual_hint="Install neovim from https://github.com/neovim/neovim/blob/master/INSTALL.md",
        version_command=["nvim", "--version"],
        after_install="neovim_version_hint",
    ),
    ToolSpec(
        id="tmux",
        label="tmux",
        checks=[PresenceCheck.binary("tmux")],
        packages=_same_name("tmux"),
    ),
    ToolSpec(
        id="tpm",
        label="tmux plugin manager (tpm)",
        checks=[PresenceCheck.directory("~/.tmux/plugins/tpm")],
        alternate=GitClone(
            url="https://github.com/tmux-plugins/tpm",
            target="~/.tmux/plugins/tpm",
        ),
        follow_up="After tmux is running, press 'prefix + I' (capital i) to install tmux plugins",
    ),

    # ── CLI tools ───────────────────────────────────────────────

    ToolSpec(
        id="ripgrep",
        label="ripgrep",
        checks=[PresenceCheck.binary("rg")],
        packages=_same_name("ripgrep"),
    ),
    ToolSpec(
        id="fd",
        label="fd",
        checks=[PresenceCheck.binary("fd")],
        packages={**_same_name("fd"), Platform.DEBIAN: "fd-find"},
        after_install="link_fd",
    ),
    ToolSpec(
        id="bat",
        label="bat",
        checks=[PresenceCheck.binary("bat"), PresenceCheck.binary("batcat")],
        packages=_same_name("bat"),
    ),
    ToolSpec(
        id="xclip",
        label="xclip (tmux clipboard support)",
        checks=[PresenceCheck.binary("xclip")],
        packages={p: "xclip" for p in _PM_PLATFORMS if p is not Platform.MACOS},
        platforms=[p for p in Platform if p is not Platform.MACOS],
    ),

    # ── Version managers ────────────────────────────────────────

    ToolSpec(
        id="nvm",
        label="nvm",
        checks=[PresenceCheck.directory("~/.nvm")],
        alternate=RemoteScript(
            url="https://raw.githubusercontent.com/nvm-sh/nvm/v0.40.1/install.sh",
            target="~/.nvm",
        ),
    ),
    ToolSpec(
        id="pyenv",
        label="pyenv",
        checks=[PresenceCheck.binary("pyenv"), PresenceCheck.directory("~/.pyenv")],
        alternate=RemoteScript(url="https://pyenv.run", target="~/.pyenv"),
    ),
    ToolSpec(
        id="tfenv",
        label="tfenv",
        checks=[PresenceCheck.binary("tfenv"), PresenceCheck.directory("~/.tfenv")],
        packages={Platform.MACOS: "tfenv"},
        alternate=GitClone(
            url="https://github.com/tfutils/tfenv.git",
            target="~/.tfenv",
            depth=1,
        ),
        after_install="link_tfenv",
    ),
]

TOOLS_BY_ID: dict[str, ToolSpec] = {t.id: t for t in TOOL_SPECS}
