"""Replay a snapshot document against a target organization.

Teams are materialized first (parents before children), then the IdP group
mappings are reported for manual configuration and manual memberships are
re-added. Every remote failure is scoped to a single team or membership:
it is logged as a warning and the run continues.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .logs import log_and_print
from .modes import effective_mode, replay_plan


@dataclass
class MaterializeResult:
    created: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


@dataclass
class MirrorSummary:
    mode: str
    teams_total: int
    teams_created: int
    teams_updated: int
    teams_skipped: int
    members_added: Optional[int] = None
    members_failed: Optional[int] = None
    idp_reported: Optional[int] = None


def find_parent_cycles(teams):
    """Slugs of teams that sit on a parent cycle within the given teams"""
    by_slug = {team.slug: team for team in teams}
    cyclic = set()
    for team in teams:
        path = []
        current = team
        while current is not None and current.slug not in cyclic:
            if current.slug in path:
                cyclic.update(path[path.index(current.slug):])
                break
            path.append(current.slug)
            current = by_slug.get(current.parent) if current.parent else None
    return cyclic


def order_child_teams(teams, cyclic=frozenset()):
    """Child teams sorted so that every parent comes before its children

    Teams in `cyclic` are left out. Depth is counted along parent links that
    stay inside the snapshot; teams at the same depth keep snapshot order.
    """
    by_slug = {team.slug: team for team in teams}

    def depth(team):
        level = 0
        current = team
        while current is not None and current.parent and current.slug not in cyclic:
            level += 1
            current = by_slug.get(current.parent)
        return level

    children = [team for team in teams if team.parent and team.slug not in cyclic]
    return sorted(children, key=depth)


def create_root_team(service, team, result):
    description = team.description or ""
    log_and_print(f"  Creating team: {team.name}")
    try:
        service.create_team(team.name, description, team.privacy)
        log_and_print(f"  Created team: {team.name}", "success")
        result.created.append(team.slug)
        return
    except Exception as e:
        log_and_print(f"  Team {team.name} already exists or creation failed, updating... ({str(e)})", "warning")

    try:
        service.update_team(team.slug, team.name, description, team.privacy)
        log_and_print(f"  Updated team: {team.name}", "success")
        result.updated.append(team.slug)
    except Exception as e:
        log_and_print(f"  Failed to update {team.name}: {str(e)}", "warning")
        result.skipped.append(team.slug)


def create_child_team(service, team, result):
    log_and_print(f"  Creating child team: {team.name} (parent: {team.parent})")
    try:
        parent_id = service.get_team_id(team.parent)
    except Exception as e:
        log_and_print(f"  Parent team '{team.parent}' not found, skipping {team.name} ({str(e)})", "warning")
        result.skipped.append(team.slug)
        return
    if not parent_id:
        log_and_print(f"  Parent team '{team.parent}' not found, skipping {team.name}", "warning")
        result.skipped.append(team.slug)
        return

    try:
        service.create_team(team.name, team.description or "", team.privacy, parent_team_id=parent_id)
        log_and_print(f"  Created child team: {team.name}", "success")
        result.created.append(team.slug)
    except Exception as e:
        log_and_print(f"  Team {team.name} already exists or creation failed: {str(e)}", "warning")
        result.skipped.append(team.slug)


def materialize_teams(service, teams):
    """Create or update teams in the target organization

    Pass 1 handles every team without a parent (create, falling back to an
    update by slug). Pass 2 handles child teams in parent-first order and
    attaches each to the target id of its parent; a child whose parent
    cannot be resolved is skipped rather than created at the top level.

    Args:
        service: TeamService for the target organization
        teams: Teams from the snapshot
    Returns:
        MaterializeResult
    """
    result = MaterializeResult()

    log_and_print("Creating parent teams...")
    for team in teams:
        if not team.parent:
            create_root_team(service, team, result)

    cyclic = find_parent_cycles(teams)
    for team in teams:
        if team.slug in cyclic:
            log_and_print(f"  Team {team.name} is part of a parent cycle, skipping", "warning")
            result.skipped.append(team.slug)

    log_and_print("Creating child teams...")
    for team in order_child_teams(teams, cyclic):
        create_child_team(service, team, result)

    return result


def report_idp_mappings(mappings):
    """Print the IdP groups that must be bound to teams by hand

    Nothing is changed remotely.

    Returns:
        int: number of mappings reported
    """
    if not mappings:
        return 0

    log_and_print("")
    log_and_print("=== IdP Group Mappings ===")
    log_and_print("The following teams require IdP group configuration:")
    log_and_print("")
    for mapping in mappings:
        log_and_print(f"Team: {mapping.team}")
        for group in mapping.groups:
            log_and_print(f"  - {group.group_name} ({group.group_id})")
        log_and_print("")

    log_and_print("MANUAL ACTION REQUIRED:", "warning")
    log_and_print("  1. Configure SAML/SCIM in target organization settings")
    log_and_print("  2. Map the above IdP groups to their respective teams")
    log_and_print("  3. Trigger an IdP sync to populate memberships")
    log_and_print("")
    return len(mappings)


def replay_memberships(service, memberships):
    """Add each user to its team with the recorded role

    Returns:
        tuple: (added, failed)
    """
    if not memberships:
        log_and_print("No manual memberships to add")
        return 0, 0

    added = 0
    failed = 0
    log_and_print("Adding team members...")
    for membership in memberships:
        log_and_print(f"  Adding {membership.username} to {membership.team} as {membership.role}")
        try:
            service.add_or_update_membership(membership.team, membership.username, membership.role)
            log_and_print(f"  Added {membership.username} to {membership.team}", "success")
            added += 1
        except Exception as e:
            log_and_print(
                f"  Failed to add {membership.username} to {membership.team} "
                f"(user may not exist in target org): {str(e)}",
                "warning",
            )
            failed += 1
    return added, failed


def mirror_snapshot(service, snapshot, mirror_mode="auto"):
    """Replay a snapshot against the target organization

    Args:
        service: TeamService for the target organization
        snapshot: Snapshot loaded from the export file
        mirror_mode: auto, or an explicit mode overriding snapshot.export_mode
    Returns:
        MirrorSummary
    """
    mode = effective_mode(mirror_mode, snapshot.export_mode)
    if mirror_mode == "auto":
        log_and_print(f"Using export mode from file: {mode}")
    else:
        log_and_print(f"Using override mode: {mode}")
    plan = replay_plan(mode)
    log_and_print("---")

    result = materialize_teams(service, snapshot.teams)
    summary = MirrorSummary(
        mode=mode,
        teams_total=len(snapshot.teams),
        teams_created=len(result.created),
        teams_updated=len(result.updated),
        teams_skipped=len(result.skipped),
    )

    if plan.report_idp:
        summary.idp_reported = report_idp_mappings(snapshot.idp_groups)

    if plan.add_members:
        summary.members_added, summary.members_failed = replay_memberships(service, snapshot.memberships)

    log_and_print("---")
    return summary


def log_mirror_summary(summary):
    log_and_print("")
    log_and_print("=== Mirror Summary ===")
    log_and_print(f"Mode: {summary.mode}")
    log_and_print(
        f"Teams created/updated: {summary.teams_created + summary.teams_updated} of {summary.teams_total} "
        f"({summary.teams_created} created, {summary.teams_updated} updated, {summary.teams_skipped} skipped)"
    )
    if summary.members_added is not None:
        log_and_print(f"Members added: {summary.members_added} ({summary.members_failed} failed)")
    if summary.idp_reported is not None:
        log_and_print(f"IdP mappings requiring configuration: {summary.idp_reported}")
    log_and_print("")
    log_and_print("Team mirroring complete!", "success")
