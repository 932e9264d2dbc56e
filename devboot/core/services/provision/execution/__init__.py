"""
L4 Execution — ``__init__.py`` re-exports all execution functions.

These functions WRITE: they run commands and mutate files.
"""

from devboot.core.services.provision.execution.backup import BackupRecord  # noqa: F401
from devboot.core.services.provision.execution.config_edit import (  # noqa: F401
    add_to_plugin_list,
    append_if_absent,
    install_symlink_or_copy,
    plugin_listed,
    replace_line_if_matched,
    set_clipboard_binding,
)
from devboot.core.services.provision.execution.hooks import (  # noqa: F401
    POST_INSTALL_HOOKS,
    run_hook,
)
from devboot.core.services.provision.execution.subprocess_runner import (  # noqa: F401
    run_subprocess,
)
