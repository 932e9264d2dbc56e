"""
L2 Resolver — ``__init__.py`` re-exports strategy selection.
"""

from devboot.core.services.provision.resolver.strategy import (  # noqa: F401
    Strategy,
    StrategyKind,
    build_alternate_cmd,
    build_pkg_install_cmd,
    select_strategy,
)
