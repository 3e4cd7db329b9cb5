# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Event ORM model – the append-only audit trail."""

import enum

from sqlalchemy import Column, String, Integer, DateTime

from database import Base


class EventType(enum.IntEnum):
    # User
    USER_LOGGED_IN = 1000
    USER_CHANGED_PASSWORD = 1001
    USER_UPDATED_2FA = 1002
    USER_DISABLED_2FA = 1003
    USER_RECOVERED_2FA = 1004
    USER_FAILED_LOG_IN = 1005
    USER_FAILED_LOG_IN_2FA = 1006
    USER_CLIENT_EXPORTED_VAULT = 1007
    # Cipher
    CIPHER_CREATED = 1100
    CIPHER_UPDATED = 1101
    CIPHER_DELETED = 1102
    CIPHER_ATTACHMENT_CREATED = 1103
    CIPHER_ATTACHMENT_DELETED = 1104
    CIPHER_SHARED = 1105
    CIPHER_UPDATED_COLLECTIONS = 1106
    CIPHER_CLIENT_VIEWED = 1107
    CIPHER_CLIENT_TOGGLED_PASSWORD_VISIBLE = 1108
    CIPHER_CLIENT_TOGGLED_HIDDEN_FIELD_VISIBLE = 1109
    CIPHER_CLIENT_TOGGLED_CARD_CODE_VISIBLE = 1110
    CIPHER_CLIENT_COPIED_PASSWORD = 1111
    CIPHER_CLIENT_COPIED_HIDDEN_FIELD = 1112
    CIPHER_CLIENT_COPIED_CARD_CODE = 1113
    CIPHER_CLIENT_AUTOFILLED = 1114
    # Collection
    COLLECTION_CREATED = 1300
    COLLECTION_UPDATED = 1301
    COLLECTION_DELETED = 1302
    # Group events (1400-1402) are left out: groups are not supported and a
    # group event with a null group id breaks the web vault.
    # OrganizationUser
    ORGANIZATION_USER_INVITED = 1500
    ORGANIZATION_USER_CONFIRMED = 1501
    ORGANIZATION_USER_UPDATED = 1502
    ORGANIZATION_USER_REMOVED = 1503
    ORGANIZATION_USER_UPDATED_GROUPS = 1504
    # Organization
    ORGANIZATION_UPDATED = 1600
    ORGANIZATION_PURGED_VAULT = 1601


class Event(Base):
    __tablename__ = "event"

    uuid = Column(String(36), primary_key=True)
    # Stored as a plain int: clients may report codes this server does not name
    event_type = Column(Integer, nullable=False)
    user_uuid = Column(String(36), nullable=True)
    org_uuid = Column(String(36), nullable=True, index=True)
    cipher_uuid = Column(String(36), nullable=True, index=True)
    collection_uuid = Column(String(36), nullable=True)
    group_uuid = Column(String(36), nullable=True)   # reserved, always NULL
    org_user_uuid = Column(String(36), nullable=True)
    act_user_uuid = Column(String(36), nullable=True)
    device_type = Column(Integer, nullable=True)
    ip_address = Column(String(45), nullable=True)   # supports IPv6
    event_date = Column(DateTime, nullable=False, index=True)
