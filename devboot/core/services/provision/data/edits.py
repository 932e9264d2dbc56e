"""
L0 Data — Shell-config edits, bundled configs and closing advice.

Pure data, no logic.  Edits are applied in list order after the tool
phase; bundled configs are installed after the edits.
"""

from __future__ import annotations

from devboot.core.models.edit import BundledConfig, ConfigEdit

ZSHRC = "~/.zshrc"

PYENV_BLOCK = """\
# pyenv configuration
export PYENV_ROOT="$HOME/.pyenv"
[[ -d $PYENV_ROOT/bin ]] && export PATH="$PYENV_ROOT/bin:$PATH"
eval "$(pyenv init -)\""""

KEYBINDINGS_BLOCK = """\
# ------------------------------
# Custom Zsh Keybindings Setup
# ------------------------------
bindkey '^B' backward-kill-line
bindkey '^F' kill-line
bindkey '^O' forward-word
bindkey '^P' backward-word
bindkey '^Y' clear-screen"""

ALIASES_BLOCK = """\
# Custom aliases
alias nf='nvim $(fzf --preview "bat --color=always --style=numbers --line-range=:500 {}")'
alias gg='nvim -c "Neogit"'"""


SHELL_EDITS: list[ConfigEdit] = [
    ConfigEdit(
        id="zsh-theme",
        kind="line",
        target=ZSHRC,
        pattern=r'^ZSH_THEME="[^"]*"',
        content='ZSH_THEME="powerlevel10k/powerlevel10k"',
        requires_tool="powerlevel10k",
    ),
    ConfigEdit(
        id="plugin-zsh-syntax-highlighting",
        kind="plugin",
        target=ZSHRC,
        content="zsh-syntax-highlighting",
        requires_tool="zsh-syntax-highlighting",
    ),
    ConfigEdit(
        id="plugin-zsh-autosuggestions",
        kind="plugin",
        target=ZSHRC,
        content="zsh-autosuggestions",
        requires_tool="zsh-autosuggestions",
    ),
    ConfigEdit(
        id="pyenv-init",
        kind="block",
        target=ZSHRC,
        marker="# pyenv configuration",
        content=PYENV_BLOCK,
        requires_tool="pyenv",
    ),
    ConfigEdit(
        id="zsh-keybindings",
        kind="block",
        target=ZSHRC,
        marker="# Custom Zsh Keybindings Setup",
        content=KEYBINDINGS_BLOCK,
    ),
    ConfigEdit(
        id="zsh-aliases",
        kind="block",
        target=ZSHRC,
        marker="# Custom aliases",
        content=ALIASES_BLOCK,
    ),
]


BUNDLED_CONFIGS: list[BundledConfig] = [
    BundledConfig(
        id="nvim-config",
        source="nvim",
        target="~/.config/nvim",
        mode="link",
        follow_up="Open nvim and let Lazy.nvim install plugins (first run may take a few minutes)",
    ),
    # Copied, not linked: the clipboard binding differs per host.
    BundledConfig(
        id="tmux-config",
        source="tmux/tmux.conf",
        target="~/.tmux.conf",
        mode="copy",
        transform="tmux_clipboard",
    ),
]


RECOMMENDED_STEPS: list[str] = [
    "Install a Nerd Font for proper icon display: https://github.com/ryanoasis/nerd-fonts "
    "(FiraCode Nerd Font or JetBrainsMono Nerd Font)",
    "Configure your terminal to use the Nerd Font",
    "Install the Catppuccin theme for your terminal: "
    "https://github.com/catppuccin/iterm, https://github.com/catppuccin/gnome-terminal, "
    "https://github.com/catppuccin/alacritty",
    "Run 'p10k configure' to customize your prompt",
    "Restart your terminal or run: source ~/.zshrc",
    "Open neovim to install plugins (first run takes time)",
    "Open tmux and press 'Ctrl-s + I' to install tmux plugins",
]
