"""
Domain models — Pydantic types for the provisioner.

All models are re-exported here for convenient access:

    from devboot.core.models import Platform, ToolSpec, ConfigEdit, ProvisionReport
"""

from devboot.core.models.edit import BundledConfig, ConfigEdit
from devboot.core.models.outcome import EditOutcome, LinkOutcome, Outcome
from devboot.core.models.platform import Platform
from devboot.core.models.report import ProvisionReport, StepResult
from devboot.core.models.tool import GitClone, PresenceCheck, RemoteScript, ToolSpec

__all__ = [
    # edit.py
    "BundledConfig",
    "ConfigEdit",
    # outcome.py
    "EditOutcome",
    "LinkOutcome",
    "Outcome",
    # platform.py
    "Platform",
    # report.py
    "ProvisionReport",
    "StepResult",
    # tool.py
    "GitClone",
    "PresenceCheck",
    "RemoteScript",
    "ToolSpec",
]
