"""
Provisioning service — package re-exports.

Each symbol lives in its single-responsibility module inside the
appropriate layer (data → resolver → detection → execution →
orchestration)::

    from devboot.core.services.provision import provision, ProvisionContext
"""

# ── Context ──
from devboot.core.services.provision.context import ProvisionContext  # noqa: F401

# ── L0: Data ──
from devboot.core.services.provision.data.edits import (  # noqa: F401
    BUNDLED_CONFIGS,
    RECOMMENDED_STEPS,
    SHELL_EDITS,
)
from devboot.core.services.provision.data.tools import TOOL_SPECS, TOOLS_BY_ID  # noqa: F401

# ── L2: Resolver ──
from devboot.core.services.provision.resolver.strategy import (  # noqa: F401
    Strategy,
    StrategyKind,
    select_strategy,
)

# ── L3: Detection ──
from devboot.core.services.provision.detection.platform import detect_platform  # noqa: F401
from devboot.core.services.provision.detection.probes import is_present  # noqa: F401

# ── L4: Execution ──
from devboot.core.services.provision.execution.backup import BackupRecord  # noqa: F401

# ── L5: Orchestration ──
from devboot.core.services.provision.orchestration.dispatcher import (  # noqa: F401
    ensure_installed,
)
from devboot.core.services.provision.orchestration.provisioner import (  # noqa: F401
    PackageManagerMissing,
    ProvisionAborted,
    check_preconditions,
    provision,
)
