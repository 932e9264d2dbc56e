"""
L3 Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
"""

from devboot.core.services.provision.detection.platform import (  # noqa: F401
    detect_platform,
    parse_os_release,
)
from devboot.core.services.provision.detection.probes import (  # noqa: F401
    binary_on_path,
    directory_exists,
    exists,
    file_contains,
    is_present,
    marker_present,
    read_text,
)
from devboot.core.services.provision.detection.system_packages import (  # noqa: F401
    is_pkg_installed,
)
from devboot.core.services.provision.detection.tool_version import (  # noqa: F401
    get_tool_version,
)
