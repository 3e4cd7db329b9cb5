"""
Unit tests for the cipher ↔ folder mapping.

Tests cover:
- Every row of the transition table
- Per-user isolation of folder placement
- Drift between the folder lookup and the link row
"""

import pytest

from core.errors import InconsistentStateError
from models.folder import FolderCipher
from vault import folders
from vault.folders import FolderMove, get_folder_uuid, move_to_folder


def _links(db, cipher):
    return db.query(FolderCipher).filter(FolderCipher.cipher_uuid == cipher.uuid).all()


class TestMoveToFolder:
    @pytest.fixture
    def owner(self, factory):
        return factory.user()

    @pytest.fixture
    def cipher(self, factory, owner):
        return factory.cipher(user=owner)

    def test_none_to_none(self, db, owner, cipher):
        assert move_to_folder(db, cipher, owner.uuid, None) is FolderMove.UNCHANGED
        assert _links(db, cipher) == []

    def test_none_to_folder(self, db, factory, owner, cipher):
        folder = factory.folder(owner)
        assert move_to_folder(db, cipher, owner.uuid, folder.uuid) is FolderMove.ASSIGNED
        db.commit()
        assert get_folder_uuid(db, cipher.uuid, owner.uuid) == folder.uuid
        assert len(_links(db, cipher)) == 1

    def test_same_folder(self, db, factory, owner, cipher):
        folder = factory.folder(owner)
        factory.file(folder, cipher)
        assert move_to_folder(db, cipher, owner.uuid, folder.uuid) is FolderMove.UNCHANGED
        assert len(_links(db, cipher)) == 1

    def test_folder_to_other_folder(self, db, factory, owner, cipher):
        old, new = factory.folder(owner, "old"), factory.folder(owner, "new")
        factory.file(old, cipher)
        assert move_to_folder(db, cipher, owner.uuid, new.uuid) is FolderMove.MOVED
        db.commit()
        links = _links(db, cipher)
        assert [link.folder_uuid for link in links] == [new.uuid]

    def test_folder_to_none(self, db, factory, owner, cipher):
        folder = factory.folder(owner)
        factory.file(folder, cipher)
        assert move_to_folder(db, cipher, owner.uuid, None) is FolderMove.REMOVED
        db.commit()
        assert _links(db, cipher) == []
        assert get_folder_uuid(db, cipher.uuid, owner.uuid) is None

    def test_remove_missing_link_is_inconsistent(self, db, factory, owner, cipher, monkeypatch):
        folder = factory.folder(owner)
        factory.file(folder, cipher)
        monkeypatch.setattr(folders, "_find_link", lambda db, folder_uuid, cipher_uuid: None)
        with pytest.raises(InconsistentStateError):
            move_to_folder(db, cipher, owner.uuid, None)

    def test_move_with_missing_old_link_still_creates(self, db, factory, owner, cipher, monkeypatch):
        old, new = factory.folder(owner, "old"), factory.folder(owner, "new")
        factory.file(old, cipher)
        monkeypatch.setattr(folders, "_find_link", lambda db, folder_uuid, cipher_uuid: None)

        assert move_to_folder(db, cipher, owner.uuid, new.uuid) is FolderMove.MOVED_WITH_DRIFT
        db.commit()
        assert new.uuid in {link.folder_uuid for link in _links(db, cipher)}


class TestPerUserPlacement:
    def test_each_user_has_own_folder(self, db, factory):
        owner, member, org = factory.user(), factory.user(), factory.org()
        cipher = factory.cipher(org=org)
        owner_folder, member_folder = factory.folder(owner), factory.folder(member)

        move_to_folder(db, cipher, owner.uuid, owner_folder.uuid)
        move_to_folder(db, cipher, member.uuid, member_folder.uuid)
        db.commit()

        assert get_folder_uuid(db, cipher.uuid, owner.uuid) == owner_folder.uuid
        assert get_folder_uuid(db, cipher.uuid, member.uuid) == member_folder.uuid

    def test_removing_one_user_keeps_the_other(self, db, factory):
        owner, member, org = factory.user(), factory.user(), factory.org()
        cipher = factory.cipher(org=org)
        owner_folder, member_folder = factory.folder(owner), factory.folder(member)
        factory.file(owner_folder, cipher)
        factory.file(member_folder, cipher)

        assert move_to_folder(db, cipher, member.uuid, None) is FolderMove.REMOVED
        db.commit()
        assert get_folder_uuid(db, cipher.uuid, owner.uuid) == owner_folder.uuid
        assert get_folder_uuid(db, cipher.uuid, member.uuid) is None
