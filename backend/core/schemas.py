# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Response envelope shared by every list endpoint."""

from typing import Any, List, Optional

from pydantic import BaseModel


class ListResponse(BaseModel):
    Data: List[Any]
    Object: str = "list"
    # No pagination cursor is produced yet; clients always get null.
    ContinuationToken: Optional[str] = None
