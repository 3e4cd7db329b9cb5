"""
Unit tests for membership lookups and cipher access resolution.

Tests cover:
- Membership resolver answers (role, blanket access, admin check)
- Write / read eligibility for personal and organization ciphers
- Visible-cipher listing (no duplicates, membership required)
- Visible collections of one cipher
"""

from access.membership import get_membership, has_blanket_access, is_admin_or_owner, role_of
from access.resolver import can_read, can_write, collections_for, find_visible
from models.organization import MembershipRole


class TestMembershipResolver:
    def test_no_membership(self, db, factory):
        user, org = factory.user(), factory.org()
        assert get_membership(db, user.uuid, org.uuid) is None
        assert role_of(db, user.uuid, org.uuid) is None
        assert has_blanket_access(db, user.uuid, org.uuid) is False
        assert is_admin_or_owner(db, user.uuid, org.uuid) is False

    def test_blanket_access(self, db, factory):
        user, org = factory.user(), factory.org()
        factory.member(user, org, MembershipRole.MANAGER, access_all=True)
        assert has_blanket_access(db, user.uuid, org.uuid) is True
        assert role_of(db, user.uuid, org.uuid) == MembershipRole.MANAGER
        assert is_admin_or_owner(db, user.uuid, org.uuid) is False

    def test_owner_and_admin(self, db, factory):
        owner, admin, org = factory.user(), factory.user(), factory.org()
        factory.member(owner, org, MembershipRole.OWNER)
        factory.member(admin, org, MembershipRole.ADMIN)
        assert is_admin_or_owner(db, owner.uuid, org.uuid)
        assert is_admin_or_owner(db, admin.uuid, org.uuid)
        assert has_blanket_access(db, admin.uuid, org.uuid) is False

    def test_membership_is_per_org(self, db, factory):
        user, org, other = factory.user(), factory.org(), factory.org("Other")
        factory.member(user, org, MembershipRole.OWNER, access_all=True)
        assert role_of(db, user.uuid, other.uuid) is None


class TestCanWrite:
    def test_personal_owner_only(self, db, factory):
        owner, stranger = factory.user(), factory.user()
        cipher = factory.cipher(user=owner)
        assert can_write(db, owner.uuid, cipher) is True
        assert can_write(db, stranger.uuid, cipher) is False

    def test_personal_cipher_ignores_org_membership(self, db, factory):
        owner, admin, org = factory.user(), factory.user(), factory.org()
        factory.member(owner, org, MembershipRole.MEMBER)
        factory.member(admin, org, MembershipRole.OWNER, access_all=True)
        cipher = factory.cipher(user=owner)
        assert can_write(db, admin.uuid, cipher) is False

    def test_org_blanket_access(self, db, factory):
        user, org = factory.user(), factory.org()
        factory.member(user, org, MembershipRole.MEMBER, access_all=True)
        cipher = factory.cipher(org=org)
        assert can_write(db, user.uuid, cipher) is True

    def test_org_owner_and_admin(self, db, factory):
        owner, admin, org = factory.user(), factory.user(), factory.org()
        factory.member(owner, org, MembershipRole.OWNER)
        factory.member(admin, org, MembershipRole.ADMIN)
        cipher = factory.cipher(org=org)
        assert can_write(db, owner.uuid, cipher) is True
        assert can_write(db, admin.uuid, cipher) is True

    def test_collection_assignment_does_not_grant_write(self, db, factory):
        member, org = factory.user(), factory.org()
        factory.member(member, org, MembershipRole.MEMBER)
        collection = factory.collection(org)
        factory.assign(member, collection)
        cipher = factory.cipher(org=org)
        factory.link(cipher, collection)
        assert can_write(db, member.uuid, cipher) is False

    def test_manager_without_blanket_access(self, db, factory):
        manager, org = factory.user(), factory.org()
        factory.member(manager, org, MembershipRole.MANAGER)
        cipher = factory.cipher(org=org)
        assert can_write(db, manager.uuid, cipher) is False

    def test_non_member(self, db, factory):
        outsider, org = factory.user(), factory.org()
        cipher = factory.cipher(org=org)
        assert can_write(db, outsider.uuid, cipher) is False

    def test_read_equals_write(self, db, factory):
        owner, member, org = factory.user(), factory.user(), factory.org()
        factory.member(member, org, MembershipRole.MEMBER)
        collection = factory.collection(org)
        factory.assign(member, collection)
        personal = factory.cipher(user=owner)
        shared = factory.cipher(org=org)
        factory.link(shared, collection)
        for user in (owner, member):
            for cipher in (personal, shared):
                assert can_read(db, user.uuid, cipher) == can_write(db, user.uuid, cipher)


class TestFindVisible:
    def test_personal_only_for_owner(self, db, factory):
        owner, other = factory.user(), factory.user()
        cipher = factory.cipher(user=owner)
        assert [c.uuid for c in find_visible(db, owner.uuid)] == [cipher.uuid]
        assert find_visible(db, other.uuid) == []

    def test_no_duplicates_through_two_collections(self, db, factory):
        member, org = factory.user(), factory.org()
        factory.member(member, org, MembershipRole.MEMBER)
        first, second = factory.collection(org, "A"), factory.collection(org, "B")
        factory.assign(member, first)
        factory.assign(member, second)
        cipher = factory.cipher(org=org)
        factory.link(cipher, first)
        factory.link(cipher, second)

        ids = [c.uuid for c in find_visible(db, member.uuid)]
        assert ids == [cipher.uuid]

    def test_blanket_and_admin_see_everything(self, db, factory):
        blanket, admin, org = factory.user(), factory.user(), factory.org()
        factory.member(blanket, org, MembershipRole.MEMBER, access_all=True)
        factory.member(admin, org, MembershipRole.ADMIN)
        ciphers = {factory.cipher(org=org).uuid for _ in range(3)}
        assert {c.uuid for c in find_visible(db, blanket.uuid)} == ciphers
        assert {c.uuid for c in find_visible(db, admin.uuid)} == ciphers

    def test_member_sees_only_assigned_collections(self, db, factory):
        member, org = factory.user(), factory.org()
        factory.member(member, org, MembershipRole.MEMBER)
        mine, theirs = factory.collection(org, "mine"), factory.collection(org, "theirs")
        factory.assign(member, mine)
        visible = factory.cipher(org=org)
        hidden = factory.cipher(org=org)
        unfiled = factory.cipher(org=org)
        factory.link(visible, mine)
        factory.link(hidden, theirs)

        ids = {c.uuid for c in find_visible(db, member.uuid)}
        assert visible.uuid in ids
        assert hidden.uuid not in ids
        assert unfiled.uuid not in ids

    def test_assignment_without_membership_is_ignored(self, db, factory):
        former, org = factory.user(), factory.org()
        collection = factory.collection(org)
        factory.assign(former, collection)
        cipher = factory.cipher(org=org)
        factory.link(cipher, collection)
        assert find_visible(db, former.uuid) == []

    def test_other_org_not_visible(self, db, factory):
        user, org, other = factory.user(), factory.org(), factory.org("Other")
        factory.member(user, org, MembershipRole.OWNER, access_all=True)
        factory.cipher(org=other)
        assert find_visible(db, user.uuid) == []


class TestCollectionsFor:
    def test_personal_cipher_has_none(self, db, factory):
        owner = factory.user()
        assert collections_for(db, owner.uuid, factory.cipher(user=owner)) == set()

    def test_non_member_gets_empty_set(self, db, factory):
        outsider, org = factory.user(), factory.org()
        collection = factory.collection(org)
        cipher = factory.cipher(org=org)
        factory.link(cipher, collection)
        assert collections_for(db, outsider.uuid, cipher) == set()

    def test_member_sees_assigned_only(self, db, factory):
        member, org = factory.user(), factory.org()
        factory.member(member, org, MembershipRole.MEMBER)
        mine, theirs = factory.collection(org, "mine"), factory.collection(org, "theirs")
        factory.assign(member, mine)
        cipher = factory.cipher(org=org)
        factory.link(cipher, mine)
        factory.link(cipher, theirs)
        assert collections_for(db, member.uuid, cipher) == {mine.uuid}

    def test_blanket_access_sees_all_links(self, db, factory):
        user, org = factory.user(), factory.org()
        factory.member(user, org, MembershipRole.MEMBER, access_all=True)
        first, second = factory.collection(org, "A"), factory.collection(org, "B")
        factory.collection(org, "unlinked")
        cipher = factory.cipher(org=org)
        factory.link(cipher, first)
        factory.link(cipher, second)
        assert collections_for(db, user.uuid, cipher) == {first.uuid, second.uuid}

    def test_admin_sees_all_links(self, db, factory):
        admin, org = factory.user(), factory.org()
        factory.member(admin, org, MembershipRole.ADMIN)
        collection = factory.collection(org)
        cipher = factory.cipher(org=org)
        factory.link(cipher, collection)
        assert collections_for(db, admin.uuid, cipher) == {collection.uuid}


class TestScenario:
    """A owns X personally; B is a plain Member assigned to K, which holds Y."""

    def test_member_with_collection(self, db, factory):
        a, b, org = factory.user(), factory.user(), factory.org()
        factory.member(b, org, MembershipRole.MEMBER)
        k = factory.collection(org, "K")
        factory.assign(b, k)
        x = factory.cipher(user=a)
        y = factory.cipher(org=org)
        factory.link(y, k)

        assert can_write(db, b.uuid, y) is False
        assert collections_for(db, b.uuid, y) == {k.uuid}
        visible = {c.uuid for c in find_visible(db, b.uuid)}
        assert y.uuid in visible
        assert x.uuid not in visible
