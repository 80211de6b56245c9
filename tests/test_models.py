"""
Tests for the snapshot document.
"""

import json

import pytest

from gh_team_mirror.models import (
    IdpGroup,
    IdpMapping,
    Membership,
    Snapshot,
    SnapshotError,
    Team,
    load_snapshot,
    save_snapshot,
)


class TestSnapshotFromDict:
    def test_missing_optional_fields_become_none(self):
        snapshot = Snapshot.from_dict({
            "teams": [{"slug": "eng", "name": "Engineering"}],
        })

        team = snapshot.teams[0]
        assert team.description is None
        assert team.parent is None
        assert team.ldap_dn is None
        assert team.permission is None
        assert team.privacy == "closed"
        assert snapshot.memberships == []
        assert snapshot.idp_groups == []

    def test_missing_export_mode_defaults_to_all(self):
        assert Snapshot.from_dict({}).export_mode == "all"

    def test_null_collections_are_empty(self):
        snapshot = Snapshot.from_dict({"teams": None, "memberships": None, "idp_groups": None})
        assert snapshot.teams == []
        assert snapshot.memberships == []
        assert snapshot.idp_groups == []

    def test_membership_role_defaults_to_member(self):
        snapshot = Snapshot.from_dict({"memberships": [{"team": "eng", "username": "alice"}]})
        assert snapshot.memberships[0].role == "member"

    def test_empty_parent_string_is_top_level(self):
        snapshot = Snapshot.from_dict({"teams": [{"slug": "eng", "name": "eng", "parent": ""}]})
        assert snapshot.teams[0].parent is None

    def test_idp_groups_keep_order(self):
        snapshot = Snapshot.from_dict({
            "idp_groups": [{
                "team": "platform",
                "groups": [
                    {"group_name": "b-group", "group_id": "2"},
                    {"group_name": "a-group", "group_id": "1"},
                ],
            }],
        })
        names = [group.group_name for group in snapshot.idp_groups[0].groups]
        assert names == ["b-group", "a-group"]

    def test_team_without_slug_is_rejected(self):
        with pytest.raises(SnapshotError):
            Snapshot.from_dict({"teams": [{"name": "nameless"}]})

    @pytest.mark.parametrize(
        "document",
        [
            {"teams": ["eng"]},
            {"teams": "eng"},
            {"memberships": [["eng", "alice"]]},
            {"idp_groups": {"team": "platform"}},
            {"idp_groups": [{"team": "platform", "groups": ["okta"]}]},
        ],
    )
    def test_wrongly_typed_collections_are_rejected(self, document):
        with pytest.raises(SnapshotError):
            Snapshot.from_dict(document)

    def test_non_object_document_is_rejected(self):
        with pytest.raises(SnapshotError):
            Snapshot.from_dict(["not", "an", "object"])


class TestSnapshotFiles:
    def test_save_writes_document_fields(self, tmp_path):
        path = tmp_path / "teams-export.json"
        snapshot = Snapshot(
            export_mode="all",
            teams=[Team(slug="eng-backend", name="eng-backend", parent="eng")],
            memberships=[Membership(team="eng-backend", username="alice", role="maintainer")],
            idp_groups=[IdpMapping(team="platform", groups=[IdpGroup(group_name="okta", group_id="g-1")])],
        )

        save_snapshot(snapshot, str(path))
        data = json.loads(path.read_text())

        assert set(data) == {"teams", "memberships", "idp_groups", "export_mode"}
        assert data["teams"][0]["parent"] == "eng"
        assert data["teams"][0]["description"] is None
        assert data["memberships"][0] == {"team": "eng-backend", "username": "alice", "role": "maintainer"}
        assert data["idp_groups"][0]["groups"][0] == {"group_name": "okta", "group_id": "g-1"}
        assert load_snapshot(str(path)) == snapshot

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_snapshot(str(tmp_path / "nope.json"))

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "teams-export.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotError):
            load_snapshot(str(path))
