"""
L0 Data — ``__init__.py`` re-exports all static tables.
"""

from devboot.core.services.provision.data.edits import (  # noqa: F401
    BUNDLED_CONFIGS,
    RECOMMENDED_STEPS,
    SHELL_EDITS,
)
from devboot.core.services.provision.data.package_managers import (  # noqa: F401
    BREW_PREFIXES,
    PACKAGE_MANAGERS,
    PackageManager,
)
from devboot.core.services.provision.data.tools import (  # noqa: F401
    TOOL_SPECS,
    TOOLS_BY_ID,
)
