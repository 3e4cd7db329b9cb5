# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Attachment metadata.  The file bytes live in external storage."""

from sqlalchemy import Column, String, Integer, Text, ForeignKey

from database import Base

_SIZE_UNITS = ["bytes", "KB", "MB", "GB", "TB"]


def display_size(num_bytes: int) -> str:
    """1024-based human readable size, e.g. ``1.5 KB``."""
    size = float(num_bytes)
    unit = 0
    while size >= 1024 and unit < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    if unit == 0:
        return f"{int(size)} {_SIZE_UNITS[0]}"
    return f"{size:.2f}".rstrip("0").rstrip(".") + f" {_SIZE_UNITS[unit]}"


class Attachment(Base):
    __tablename__ = "attachments"

    id = Column(String(36), primary_key=True)
    cipher_uuid = Column(String(36), ForeignKey("ciphers.uuid"), nullable=False, index=True)
    file_name = Column(Text, nullable=False)   # encrypted by the client
    file_size = Column(Integer, nullable=False)
    akey = Column(Text, nullable=True)         # encrypted attachment key

    def to_json(self, host: str) -> dict:
        return {
            "Id": self.id,
            "Url": f"{host}/attachments/{self.cipher_uuid}/{self.id}",
            "FileName": self.file_name,
            "Size": str(self.file_size),
            "SizeName": display_size(self.file_size),
            "Key": self.akey,
            "Object": "attachment",
        }
