"""Snapshot document exchanged between the exporter and the mirrorer.

The document is a JSON object::

    {
        "teams": [{"slug", "name", "description", "privacy", "permission", "parent", "ldap_dn"}],
        "memberships": [{"team", "username", "role"}],
        "idp_groups": [{"team", "groups": [{"group_name", "group_id"}]}],
        "export_mode": "all"
    }

Optional fields that are absent deserialize to None (or an empty list).
"""

import json
import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_EXPORT_FILE = "teams-export.json"


class SnapshotError(ValueError):
    """Raised when a snapshot document cannot be read"""


@dataclass(frozen=True)
class Team:
    slug: str
    name: str
    description: Optional[str] = None
    privacy: str = "closed"
    permission: Optional[str] = None
    parent: Optional[str] = None
    ldap_dn: Optional[str] = None

    def to_dict(self):
        return {
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "privacy": self.privacy,
            "permission": self.permission,
            "parent": self.parent,
            "ldap_dn": self.ldap_dn,
        }

    @classmethod
    def from_dict(cls, data):
        slug = data.get("slug")
        if not slug:
            raise SnapshotError(f"Team entry without a slug: {data!r}")
        return cls(
            slug=slug,
            name=data.get("name") or slug,
            description=data.get("description"),
            privacy=data.get("privacy") or "closed",
            permission=data.get("permission"),
            parent=data.get("parent") or None,
            ldap_dn=data.get("ldap_dn"),
        )


@dataclass(frozen=True)
class Membership:
    team: str
    username: str
    role: str = "member"

    def to_dict(self):
        return {"team": self.team, "username": self.username, "role": self.role}

    @classmethod
    def from_dict(cls, data):
        if not data.get("team") or not data.get("username"):
            raise SnapshotError(f"Membership entry without team or username: {data!r}")
        return cls(team=data["team"], username=data["username"], role=data.get("role") or "member")


@dataclass(frozen=True)
class IdpGroup:
    group_name: str
    group_id: str
    group_description: Optional[str] = None

    def to_dict(self):
        data = {"group_name": self.group_name, "group_id": self.group_id}
        if self.group_description is not None:
            data["group_description"] = self.group_description
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            group_name=data.get("group_name") or "",
            group_id=str(data.get("group_id") or ""),
            group_description=data.get("group_description"),
        )


@dataclass(frozen=True)
class IdpMapping:
    team: str
    groups: List[IdpGroup] = field(default_factory=list)

    def to_dict(self):
        return {"team": self.team, "groups": [group.to_dict() for group in self.groups]}

    @classmethod
    def from_dict(cls, data):
        if not data.get("team"):
            raise SnapshotError(f"IdP mapping entry without a team: {data!r}")
        return cls(
            team=data["team"],
            groups=[IdpGroup.from_dict(group) for group in _entries(data, "groups")],
        )


@dataclass
class Snapshot:
    """Point-in-time record of a source organization's teams.

    Entries are only ever appended while exporting; after that the snapshot
    is treated as read-only.
    """

    export_mode: str = "all"
    teams: List[Team] = field(default_factory=list)
    memberships: List[Membership] = field(default_factory=list)
    idp_groups: List[IdpMapping] = field(default_factory=list)

    def to_dict(self):
        return {
            "teams": [team.to_dict() for team in self.teams],
            "memberships": [membership.to_dict() for membership in self.memberships],
            "idp_groups": [mapping.to_dict() for mapping in self.idp_groups],
            "export_mode": self.export_mode,
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot document must be a JSON object")
        return cls(
            export_mode=data.get("export_mode") or "all",
            teams=[Team.from_dict(team) for team in _entries(data, "teams")],
            memberships=[Membership.from_dict(m) for m in _entries(data, "memberships")],
            idp_groups=[IdpMapping.from_dict(m) for m in _entries(data, "idp_groups")],
        )


def _entries(data, key):
    """List of objects stored under key; absent or null means empty"""
    entries = data.get(key) or []
    if not isinstance(entries, list):
        raise SnapshotError(f"'{key}' must be a list, got {type(entries).__name__}")
    for entry in entries:
        if not isinstance(entry, dict):
            raise SnapshotError(f"'{key}' entries must be objects, got {entry!r}")
    return entries


def save_snapshot(snapshot, path=DEFAULT_EXPORT_FILE):
    """Write the snapshot document to disk as JSON"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(snapshot.to_dict(), f, indent=2)
        f.write("\n")


def load_snapshot(path=DEFAULT_EXPORT_FILE):
    """Read a snapshot document

    Args:
        path: Location of the JSON document
    Returns:
        Snapshot
    Raises:
        FileNotFoundError: if the document does not exist
        SnapshotError: if the document is not a valid snapshot
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"{path} is not valid JSON: {e}") from e
    return Snapshot.from_dict(data)
