"""Access to the GitHub teams API.

The exporter and mirrorer only talk to the TeamService interface below.
GitHubTeamService implements it with PyGithub for team and membership
objects and a plain REST call (requests) for the team-sync endpoint that
PyGithub does not wrap.
"""

from typing import List, Optional, Protocol
from urllib.parse import urlparse

import requests
from github import Auth, Github
from github.GithubObject import NotSet

from .models import IdpGroup, Team

DEFAULT_URL = "https://github.com"


class TeamService(Protocol):
    def list_teams(self) -> List[Team]: ...

    def get_idp_groups(self, team_slug: str) -> List[IdpGroup]: ...

    def list_team_members(self, team_slug: str) -> List[str]: ...

    def get_member_role(self, team_slug: str, username: str) -> str: ...

    def create_team(self, name: str, description: str, privacy: str, parent_team_id: Optional[int] = None): ...

    def update_team(self, team_slug: str, name: str, description: str, privacy: str): ...

    def get_team_id(self, team_slug: str) -> int: ...

    def add_or_update_membership(self, team_slug: str, username: str, role: str): ...


def hostname_from_url(url):
    """Extract the host from a URL such as https://github.example.com/some/path"""
    url = (url or DEFAULT_URL).strip()
    if "://" not in url:
        url = f"https://{url}"
    return urlparse(url).hostname or "github.com"


def api_base_url(url):
    """REST API base URL for a GitHub instance

    github.com uses api.github.com, GHE.com tenants use api.<host>,
    and GitHub Enterprise Server serves the API under /api/v3.
    """
    host = hostname_from_url(url)
    if host in ("github.com", "api.github.com"):
        return "https://api.github.com"
    if host.endswith(".ghe.com"):
        if host.startswith("api."):
            return f"https://{host}"
        return f"https://api.{host}"
    return f"https://{host}/api/v3"


def make_github_request(method, url, headers, json_data=None, params=None):
    """Send a request to the GitHub REST API and return the raw response"""
    return requests.request(method, url, headers=headers, json=json_data, params=params)


class GitHubTeamService:
    """TeamService bound to one organization on one GitHub instance"""

    def __init__(self, org_name, token, base_url="https://api.github.com", client=None):
        self.org_name = org_name
        self.base_url = base_url.rstrip("/")
        self.headers = {
            'Accept': 'application/vnd.github+json',
            'Authorization': f'Bearer {token}',
            'X-GitHub-Api-Version': '2022-11-28',
        }
        self.gh = client if client is not None else Github(base_url=self.base_url, auth=Auth.Token(token))
        self._org = None

    @property
    def org(self):
        if self._org is None:
            self._org = self.gh.get_organization(self.org_name)
        return self._org

    def list_teams(self):
        teams = []
        for team in self.org.get_teams():
            teams.append(Team(
                slug=team.slug,
                name=team.name or team.slug,
                description=team.description,
                privacy=team.privacy or "closed",
                permission=team.permission,
                parent=team.parent.slug if team.parent else None,
                # only set on GitHub Enterprise Server with LDAP sync
                ldap_dn=team.raw_data.get("ldap_dn"),
            ))
        return teams

    def get_idp_groups(self, team_slug):
        """Group mappings of a team synced with an identity provider

        Returns an empty list when the team has no mapping (404 or no groups).
        Any other failure raises requests.HTTPError.
        """
        url = f"{self.base_url}/orgs/{self.org_name}/teams/{team_slug}/team-sync/group-mappings"
        response = make_github_request('get', url, headers=self.headers)
        if response.status_code == 404:
            return []
        response.raise_for_status()
        payload = response.json() or {}
        if isinstance(payload, list):
            groups = payload
        else:
            groups = payload.get('groups') or []
        return [IdpGroup.from_dict(group) for group in groups]

    def list_team_members(self, team_slug):
        team = self.org.get_team_by_slug(team_slug)
        return [member.login for member in team.get_members()]

    def get_member_role(self, team_slug, username):
        team = self.org.get_team_by_slug(team_slug)
        return team.get_team_membership(username).role

    def create_team(self, name, description, privacy, parent_team_id=None):
        return self.org.create_team(
            name=name,
            description=description,
            privacy=privacy,
            parent_team_id=parent_team_id if parent_team_id is not None else NotSet,
        )

    def update_team(self, team_slug, name, description, privacy):
        team = self.org.get_team_by_slug(team_slug)
        team.edit(name=name, description=description, privacy=privacy)
        return team

    def get_team_id(self, team_slug):
        return self.org.get_team_by_slug(team_slug).id

    def add_or_update_membership(self, team_slug, username, role):
        team = self.org.get_team_by_slug(team_slug)
        user = self.gh.get_user(username)
        team.add_membership(user, role=role)
