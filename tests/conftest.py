"""
Shared fixtures: an in-memory TeamService that records every call.
"""

import pytest

from gh_team_mirror.models import IdpGroup, Team


class RemoteError(Exception):
    pass


def slugify(name):
    return name.lower().replace(" ", "-")


class FakeTeamService:
    """In-memory stand-in for one GitHub organization"""

    def __init__(self, teams=None, idp=None, members=None, roles=None, users=None):
        # source side
        self.teams = list(teams or [])
        self.idp = dict(idp or {})
        self.members = dict(members or {})
        self.roles = dict(roles or {})
        # target side
        self.remote = {}
        self.memberships = {}
        self.users = users
        self.calls = []
        self._next_id = 100

    # --- reads -------------------------------------------------------------

    def list_teams(self):
        self.calls.append(("list_teams",))
        return list(self.teams)

    def get_idp_groups(self, team_slug):
        self.calls.append(("get_idp_groups", team_slug))
        value = self.idp.get(team_slug, [])
        if isinstance(value, Exception):
            raise value
        return value

    def list_team_members(self, team_slug):
        self.calls.append(("list_team_members", team_slug))
        value = self.members.get(team_slug, [])
        if isinstance(value, Exception):
            raise value
        return list(value)

    def get_member_role(self, team_slug, username):
        self.calls.append(("get_member_role", team_slug, username))
        value = self.roles.get((team_slug, username), "member")
        if isinstance(value, Exception):
            raise value
        return value

    # --- target ------------------------------------------------------------

    def add_existing_team(self, slug, name=None, parent_id=None):
        self._next_id += 1
        self.remote[slug] = {
            "id": self._next_id,
            "name": name or slug,
            "description": "",
            "privacy": "closed",
            "parent_id": parent_id,
        }
        return self._next_id

    def create_team(self, name, description, privacy, parent_team_id=None):
        self.calls.append(("create_team", name, parent_team_id))
        slug = slugify(name)
        if slug in self.remote:
            raise RemoteError("Validation Failed: Name must be unique for this org")
        if parent_team_id is not None and parent_team_id not in {t["id"] for t in self.remote.values()}:
            raise RemoteError("Validation Failed: parent_team_id does not exist")
        self._next_id += 1
        self.remote[slug] = {
            "id": self._next_id,
            "name": name,
            "description": description,
            "privacy": privacy,
            "parent_id": parent_team_id,
        }
        return self.remote[slug]

    def update_team(self, team_slug, name, description, privacy):
        self.calls.append(("update_team", team_slug))
        if team_slug not in self.remote:
            raise RemoteError("Not Found")
        self.remote[team_slug].update(name=name, description=description, privacy=privacy)
        return self.remote[team_slug]

    def get_team_id(self, team_slug):
        self.calls.append(("get_team_id", team_slug))
        if team_slug not in self.remote:
            raise RemoteError("Not Found")
        return self.remote[team_slug]["id"]

    def add_or_update_membership(self, team_slug, username, role):
        self.calls.append(("add_or_update_membership", team_slug, username, role))
        if self.users is not None and username not in self.users:
            raise RemoteError(f"User {username} not found")
        if team_slug not in self.remote:
            raise RemoteError("Not Found")
        self.memberships[(team_slug, username)] = role

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def fake_service():
    return FakeTeamService()


@pytest.fixture
def source_org():
    """Source organization with one IdP-synced team and one manual team"""
    return FakeTeamService(
        teams=[
            Team(slug="eng", name="eng", description="Engineering", privacy="closed", permission="pull"),
            Team(slug="eng-backend", name="eng-backend", privacy="closed", permission="pull", parent="eng"),
            Team(slug="platform", name="platform", privacy="secret", permission="push"),
        ],
        idp={
            "platform": [IdpGroup(group_name="okta-platform", group_id="g-1")],
        },
        members={
            "eng": ["bob"],
            "eng-backend": ["alice", "carol"],
            "platform": ["dave"],
        },
        roles={
            ("eng-backend", "alice"): "maintainer",
        },
    )
