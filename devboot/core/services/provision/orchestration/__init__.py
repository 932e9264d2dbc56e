"""
L5 Orchestration — ``__init__.py`` re-exports the coordinators.
"""

from devboot.core.services.provision.orchestration.dispatcher import (  # noqa: F401
    ensure_installed,
)
from devboot.core.services.provision.orchestration.provisioner import (  # noqa: F401
    PackageManagerMissing,
    ProvisionAborted,
    apply_edit,
    check_preconditions,
    install_bundled,
    provision,
)
