from .logs import log_and_print
from .models import IdpMapping, Membership, Snapshot
from .modes import SyncStatus, resolve_capture, validate_export_mode


def get_sync_status(service, team_slug):
    """Check whether a team is synced with an identity provider

    Args:
        service: TeamService for the source organization
        team_slug: Slug of the team
    Returns:
        tuple: (SyncStatus, list of IdpGroup). A failed query gives UNKNOWN and no groups.
    """
    try:
        groups = service.get_idp_groups(team_slug)
    except Exception as e:
        log_and_print(f"Could not read IdP group mappings for '{team_slug}', treating as not synced: {str(e)}", "warning")
        return SyncStatus.UNKNOWN, []
    if groups:
        return SyncStatus.SYNCED, list(groups)
    return SyncStatus.NOT_SYNCED, []


def export_team_members(service, team_slug):
    """Collect manual memberships of a team, one role lookup per member"""
    try:
        usernames = service.list_team_members(team_slug)
    except Exception as e:
        log_and_print(f"Error listing members of team '{team_slug}': {str(e)}", "warning")
        return []

    memberships = []
    for username in usernames:
        try:
            role = service.get_member_role(team_slug, username)
        except Exception as e:
            log_and_print(f"Could not read role of '{username}' in '{team_slug}', defaulting to member: {str(e)}", "warning")
            role = None
        if role not in ("member", "maintainer"):
            role = "member"
        memberships.append(Membership(team=team_slug, username=username, role=role))
    return memberships


def export_teams(service, mode="all"):
    """Build a snapshot of the source organization

    Args:
        service: TeamService for the source organization
        mode: Export mode (all, idp-only, members-only, teams-only)
    Returns:
        Snapshot
    """
    validate_export_mode(mode)
    snapshot = Snapshot(export_mode=mode)

    log_and_print("Fetching teams...")
    snapshot.teams.extend(service.list_teams())
    log_and_print(f"Found {len(snapshot.teams)} teams")

    if mode == "teams-only":
        log_and_print("Skipping member and IdP group export (teams-only mode)")
        return snapshot

    log_and_print("Fetching team details...")
    for index, team in enumerate(snapshot.teams, 1):
        log_and_print(f"  Processing team: {team.slug} ({index}/{len(snapshot.teams)})")

        status, groups = get_sync_status(service, team.slug)
        plan = resolve_capture(mode, status)

        if plan.capture_idp:
            log_and_print(f"  → Exporting IdP groups for {team.slug}")
            snapshot.idp_groups.append(IdpMapping(team=team.slug, groups=groups))

        if plan.capture_members:
            log_and_print(f"  → Exporting members for {team.slug}")
            snapshot.memberships.extend(export_team_members(service, team.slug))
        elif status is SyncStatus.SYNCED:
            log_and_print("  → Skipping members (IdP-managed team)")
        else:
            log_and_print(f"  → Skipping members (export mode: {mode})")

    return snapshot


def log_export_summary(snapshot, output_file):
    log_and_print("")
    log_and_print(f"Exported {len(snapshot.teams)} teams", "success")
    log_and_print(f"Exported {len(snapshot.memberships)} manual memberships", "success")
    log_and_print(f"Exported {len(snapshot.idp_groups)} IdP group mappings", "success")
    log_and_print(f"Export mode: {snapshot.export_mode}", "success")
    log_and_print(f"Data saved to {output_file}", "success")
