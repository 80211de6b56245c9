"""Command-line entry points.

Usage:
    gh-team-export <source-org> [source-url]     (EXPORT_MODE=all|idp-only|members-only|teams-only)
    gh-team-mirror <target-org> [target-url]     (MIRROR_MODE=auto|all|idp-only|members-only|teams-only)

The export writes teams-export.json in the current directory; the mirror
reads it back.
"""

import os

import click

from .config import Settings, load_env_file
from .exporter import export_teams, log_export_summary
from .github_api import DEFAULT_URL, GitHubTeamService, api_base_url, hostname_from_url
from .logs import log_and_print, setup_logging
from .mirrorer import log_mirror_summary, mirror_snapshot
from .models import SnapshotError, load_snapshot, save_snapshot
from .modes import EXPORT_MODES, MIRROR_MODES, effective_mode


def _require_token(settings, env_var):
    if not settings.token:
        raise click.ClickException(f"No token provided: set {env_var} (or GITHUB_TOKEN)")
    return settings.token


@click.command("gh-team-export")
@click.argument("source_org")
@click.argument("source_url", required=False, default=DEFAULT_URL)
@click.option(
    "--mode",
    envvar="EXPORT_MODE",
    type=click.Choice(EXPORT_MODES),
    default="all",
    show_default=True,
    help="What to export: teams, members and IdP groups (all), or a subset.",
)
def export_command(source_org, source_url, mode):
    """Export teams, memberships and IdP group mappings of SOURCE_ORG."""
    load_env_file()
    settings = Settings.from_env("GH_SOURCE_TOKEN")
    token = _require_token(settings, "GH_SOURCE_TOKEN")
    setup_logging(settings.log_dir, prefix="TEAM_EXPORT")

    log_and_print(f"Exporting teams from organization: {source_org} on {hostname_from_url(source_url)}")
    log_and_print(f"Export mode: {mode}")

    service = GitHubTeamService(source_org, token, api_base_url(source_url))
    try:
        snapshot = export_teams(service, mode)
    except Exception as e:
        raise click.ClickException(f"Failed to export teams from '{source_org}': {str(e)}")

    save_snapshot(snapshot, settings.export_file)
    log_export_summary(snapshot, settings.export_file)


@click.command("gh-team-mirror")
@click.argument("target_org")
@click.argument("target_url", required=False, default=DEFAULT_URL)
@click.option(
    "--mode",
    envvar="MIRROR_MODE",
    type=click.Choice(MIRROR_MODES),
    default="auto",
    show_default=True,
    help="What to mirror; auto uses the mode recorded in the export file.",
)
def mirror_command(target_org, target_url, mode):
    """Mirror the exported teams into TARGET_ORG."""
    load_env_file()
    settings = Settings.from_env("GH_TARGET_TOKEN")

    if not os.path.isfile(settings.export_file):
        raise click.ClickException(f"{settings.export_file} not found. Run gh-team-export first.")
    try:
        snapshot = load_snapshot(settings.export_file)
    except SnapshotError as e:
        raise click.ClickException(str(e))
    try:
        effective_mode(mode, snapshot.export_mode)
    except ValueError as e:
        raise click.ClickException(f"{settings.export_file}: {str(e)}")

    token = _require_token(settings, "GH_TARGET_TOKEN")
    setup_logging(settings.log_dir, prefix="TEAM_MIRROR")

    log_and_print(f"Mirroring teams to organization: {target_org} on {hostname_from_url(target_url)}")
    service = GitHubTeamService(target_org, token, api_base_url(target_url))
    summary = mirror_snapshot(service, snapshot, mode)
    log_mirror_summary(summary)
