# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Pydantic request models for the cipher endpoints.

Every string value below is client-side ciphertext and is stored exactly as
received.  The type-specific block (Login / SecureNote / Card / Identity) is
a tagged union keyed by ``Type``: only the block matching the type is kept.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from models.cipher import CipherType

# Wire name of the type-specific block, per cipher type
TYPE_KEYS = {
    CipherType.LOGIN: "Login",
    CipherType.SECURE_NOTE: "SecureNote",
    CipherType.CARD: "Card",
    CipherType.IDENTITY: "Identity",
}


class _WireModel(BaseModel):
    # Unknown keys are kept so newer clients don't lose data on a round-trip
    model_config = {"populate_by_name": True, "extra": "allow"}


# -- Type-specific blocks --------------------------------------------------


class LoginUri(_WireModel):
    uri: Optional[str] = Field(None, alias="Uri")
    match: Optional[int] = Field(None, alias="Match")


class LoginData(_WireModel):
    username: Optional[str] = Field(None, alias="Username")
    password: Optional[str] = Field(None, alias="Password")
    totp: Optional[str] = Field(None, alias="Totp")
    uris: Optional[List[LoginUri]] = Field(None, alias="Uris")


class SecureNoteData(_WireModel):
    type: int = Field(0, alias="Type")


class CardData(_WireModel):
    cardholder_name: Optional[str] = Field(None, alias="CardholderName")
    brand: Optional[str] = Field(None, alias="Brand")
    number: Optional[str] = Field(None, alias="Number")
    exp_month: Optional[str] = Field(None, alias="ExpMonth")
    exp_year: Optional[str] = Field(None, alias="ExpYear")
    code: Optional[str] = Field(None, alias="Code")


class IdentityData(_WireModel):
    title: Optional[str] = Field(None, alias="Title")
    first_name: Optional[str] = Field(None, alias="FirstName")
    middle_name: Optional[str] = Field(None, alias="MiddleName")
    last_name: Optional[str] = Field(None, alias="LastName")
    address1: Optional[str] = Field(None, alias="Address1")
    address2: Optional[str] = Field(None, alias="Address2")
    address3: Optional[str] = Field(None, alias="Address3")
    city: Optional[str] = Field(None, alias="City")
    state: Optional[str] = Field(None, alias="State")
    postal_code: Optional[str] = Field(None, alias="PostalCode")
    country: Optional[str] = Field(None, alias="Country")
    company: Optional[str] = Field(None, alias="Company")
    email: Optional[str] = Field(None, alias="Email")
    phone: Optional[str] = Field(None, alias="Phone")
    ssn: Optional[str] = Field(None, alias="SSN")
    username: Optional[str] = Field(None, alias="Username")
    passport_number: Optional[str] = Field(None, alias="PassportNumber")
    license_number: Optional[str] = Field(None, alias="LicenseNumber")


# -- Requests --------------------------------------------------------------


class CipherRequest(BaseModel):
    model_config = {"populate_by_name": True}

    type: CipherType = Field(alias="Type")
    name: str = Field(alias="Name")
    notes: Optional[str] = Field(None, alias="Notes")
    favorite: bool = Field(False, alias="Favorite")
    folder_id: Optional[str] = Field(None, alias="FolderId")
    organization_id: Optional[str] = Field(None, alias="OrganizationId")
    collection_ids: List[str] = Field(default_factory=list, alias="CollectionIds")
    fields: Optional[List[Dict[str, Any]]] = Field(None, alias="Fields")

    login: Optional[LoginData] = Field(None, alias="Login")
    secure_note: Optional[SecureNoteData] = Field(None, alias="SecureNote")
    card: Optional[CardData] = Field(None, alias="Card")
    identity: Optional[IdentityData] = Field(None, alias="Identity")

    @model_validator(mode="after")
    def _block_matches_type(self):
        if self.type_block() is None:
            raise ValueError(f"{TYPE_KEYS[self.type]} data is required for Type {int(self.type)}")
        return self

    def type_block(self) -> Optional[_WireModel]:
        """The data block selected by ``Type``; the others are ignored."""
        return {
            CipherType.LOGIN: self.login,
            CipherType.SECURE_NOTE: self.secure_note,
            CipherType.CARD: self.card,
            CipherType.IDENTITY: self.identity,
        }[self.type]


class PartialCipherRequest(BaseModel):
    model_config = {"populate_by_name": True}

    folder_id: Optional[str] = Field(None, alias="FolderId")
    favorite: bool = Field(False, alias="Favorite")
