"""Export/mirror modes and the per-team capture decision."""

from enum import Enum
from typing import NamedTuple

EXPORT_MODES = ("all", "idp-only", "members-only", "teams-only")
MIRROR_MODES = ("auto",) + EXPORT_MODES


class SyncStatus(Enum):
    SYNCED = "synced"
    NOT_SYNCED = "not-synced"
    UNKNOWN = "unknown"  # the group-mapping query failed


class CapturePlan(NamedTuple):
    capture_members: bool
    capture_idp: bool


class ReplayPlan(NamedTuple):
    report_idp: bool
    add_members: bool


def validate_export_mode(mode):
    if mode not in EXPORT_MODES:
        raise ValueError(f"Unknown export mode '{mode}' (expected one of: {', '.join(EXPORT_MODES)})")
    return mode


def validate_mirror_mode(mode):
    if mode not in MIRROR_MODES:
        raise ValueError(f"Unknown mirror mode '{mode}' (expected one of: {', '.join(MIRROR_MODES)})")
    return mode


def _as_status(sync_status):
    if isinstance(sync_status, SyncStatus):
        return sync_status
    return SyncStatus.SYNCED if sync_status else SyncStatus.NOT_SYNCED


def resolve_capture(mode, sync_status):
    """Decide what to capture for one team

    UNKNOWN sync status is treated as NOT_SYNCED, so a team whose mapping
    could not be read still has its members captured in 'all' mode.

    Args:
        mode: One of EXPORT_MODES
        sync_status: SyncStatus, or a bool meaning synced / not synced
    Returns:
        CapturePlan(capture_members, capture_idp)
    """
    validate_export_mode(mode)
    synced = _as_status(sync_status) is SyncStatus.SYNCED

    if mode == "teams-only":
        return CapturePlan(False, False)
    if mode == "idp-only":
        return CapturePlan(False, synced)
    if mode == "members-only":
        return CapturePlan(True, False)
    return CapturePlan(not synced, synced)


def effective_mode(mirror_mode, export_mode):
    """Resolve the mirror mode: 'auto' adopts the mode recorded in the snapshot"""
    validate_mirror_mode(mirror_mode)
    if mirror_mode == "auto":
        return validate_export_mode(export_mode or "all")
    return mirror_mode


def replay_plan(mode):
    """Which mirror steps run for an effective mode"""
    validate_export_mode(mode)
    return ReplayPlan(
        report_idp=mode in ("all", "idp-only"),
        add_members=mode in ("all", "members-only"),
    )
