"""
Tests for group creation, lookup and random selection.
"""

from collections import Counter
from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from app.models import Group, Image
from app.models.timestamps import utc_now
from app.services import groups as group_service
from app.services.exceptions import ValidationError


class TestNormalizeInput:
    def test_name_is_stripped(self):
        assert group_service.normalize_name("  sunset ") == "sunset"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, name):
        with pytest.raises(ValidationError):
            group_service.normalize_name(name)

    def test_long_name_rejected(self):
        with pytest.raises(ValidationError):
            group_service.normalize_name("x" * 101)

    def test_tags_deduplicated_in_order(self):
        assert group_service.normalize_tags([" cute", "couple", "cute", "", "  "]) == ["cute", "couple"]

    def test_empty_tags_allowed(self):
        assert group_service.normalize_tags([]) == []
        assert group_service.normalize_tags(None) == []

    def test_too_many_tags_rejected(self):
        with pytest.raises(ValidationError):
            group_service.normalize_tags([f"t{i}" for i in range(11)])

    def test_non_string_tag_rejected(self):
        with pytest.raises(ValidationError):
            group_service.normalize_tags(["ok", 3])


class TestCreateGroup:
    @pytest.mark.asyncio
    async def test_create_group_scenario(self, db, store, owner, upload, png):
        """Three 1MB images create a pending group owned by the caller."""
        files = [upload(f"{i}.png", png(1024 * 1024)) for i in range(3)]

        created = await group_service.create_group(
            db, store, owner, "sunset", ["cute", "couple"], files
        )
        assert created is True

        pending = group_service.get_unapproved_groups(db)
        assert [g.name for g in pending] == ["sunset"]

        group = pending[0]
        assert group.user.id == owner.id
        assert group.tags == ["cute", "couple"]
        assert len(group.images) == 3
        assert group.approved_at is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [1, 5])
    async def test_image_count_out_of_bounds(self, db, store, owner, upload, count):
        """Creation with 1 or 5 images fails and leaves nothing behind."""
        files = [upload(f"{i}.png") for i in range(count)]

        with pytest.raises(ValidationError):
            await group_service.create_group(db, store, owner, "bad", [], files)

        assert db.exec(select(Group)).all() == []
        assert db.exec(select(Image)).all() == []
        assert not store.root.exists()

    @pytest.mark.asyncio
    async def test_blank_name_uploads_nothing(self, db, store, owner, upload):
        with pytest.raises(ValidationError):
            await group_service.create_group(db, store, owner, " ", [], [upload("a.png"), upload("b.png")])

        assert not store.root.exists()

    @pytest.mark.asyncio
    async def test_persistence_failure_returns_false(self, db, store, owner, upload):
        files = [upload("a.png"), upload("b.png")]

        with patch.object(db, "commit", side_effect=OperationalError("INSERT", {}, Exception("db down"))):
            created = await group_service.create_group(db, store, owner, "sunset", [], files)

        assert created is False
        assert db.exec(select(Group)).all() == []

    @pytest.mark.asyncio
    async def test_storage_failure_returns_false(self, db, store, owner, upload):
        files = [upload("a.png"), upload("b.png")]

        with patch("pathlib.Path.write_bytes", side_effect=OSError("disk full")):
            created = await group_service.create_group(db, store, owner, "sunset", [], files)

        assert created is False
        assert db.exec(select(Group)).all() == []


class TestGetGroup:
    def test_get_existing_group(self, db, owner, make_group):
        group_id = make_group(owner, "pair", tags=["a"], image_count=4)

        group = group_service.get_group(db, group_id)

        assert group.id == group_id
        assert group.name == "pair"
        assert len(group.images) == 4
        assert group.user.name == "alice"

    def test_get_missing_group_is_none(self, db):
        assert group_service.get_group(db, 9999) is None


class TestRandomSelection:
    def test_never_returns_previous(self, db, owner, make_group):
        ids = [make_group(owner, f"g{i}", approved=True) for i in range(3)]

        for _ in range(50):
            group = group_service.get_random_group(db, previous_id=ids[0])
            assert group is not None
            assert group.id != ids[0]

    def test_unapproved_hidden_by_default(self, db, owner, make_group):
        approved_id = make_group(owner, "approved", approved=True)
        make_group(owner, "pending")

        for _ in range(50):
            assert group_service.get_random_group(db).id == approved_id

    def test_only_pending_groups_gives_empty_result(self, db, owner, make_group):
        make_group(owner, "pending-1")
        make_group(owner, "pending-2")

        assert group_service.get_random_group(db, include_unapproved=False) is None

    def test_include_unapproved(self, db, owner, make_group):
        pending_id = make_group(owner, "pending")

        group = group_service.get_random_group(db, include_unapproved=True)
        assert group.id == pending_id

    def test_single_group_excluded_by_previous_id(self, db, owner, make_group):
        only_id = make_group(owner, "only", approved=True)
        assert group_service.get_random_group(db, previous_id=only_id) is None

    def test_empty_store(self, db):
        assert group_service.get_random_group(db) is None

    def test_every_eligible_group_is_reachable(self, db, owner, make_group):
        ids = [make_group(owner, f"g{i}", approved=True) for i in range(4)]

        counts = Counter(group_service.get_random_group(db).id for _ in range(400))

        assert set(counts) == set(ids)
        # Uniform picks put roughly 100 on each; 40 is far outside chance
        assert min(counts.values()) > 40


class TestUnapprovedGroups:
    def test_only_pending_groups_listed(self, db, owner, make_group):
        make_group(owner, "approved", approved=True)
        pending_id = make_group(owner, "pending")

        assert [g.id for g in group_service.get_unapproved_groups(db)] == [pending_id]

    def test_listed_in_creation_order(self, db, owner, other_user, make_group):
        first = make_group(owner, "first")
        second = make_group(other_user, "second")

        assert [g.id for g in group_service.get_unapproved_groups(db)] == [first, second]

    def test_recently_reviewed_groups_held_back(self, db, owner, make_group):
        now = utc_now()
        make_group(owner, "recent", last_reviewed_at=now - timedelta(hours=2))
        stale_id = make_group(owner, "stale", last_reviewed_at=now - timedelta(hours=25))
        never_id = make_group(owner, "never")

        listed = [g.id for g in group_service.get_unapproved_groups(db, now=now)]
        assert listed == [stale_id, never_id]
