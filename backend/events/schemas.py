# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request models for the event endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


# -- Requests --------------------------------------------------------------
# The collector validates each item on its own (see events.recorder), so one
# malformed item never fails the whole batch.  ``Date`` stays a string here
# and is parsed by the recorder.


class EventOccurrence(BaseModel):
    model_config = {"populate_by_name": True}

    type: int = Field(alias="Type")
    date: str = Field(alias="Date")
    cipher_id: Optional[str] = Field(None, alias="CipherId")
