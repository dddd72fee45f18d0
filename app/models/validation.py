from __future__ import annotations

from typing import Generic, Literal, TypeVar, Union

from pydantic import BaseModel, Field

T = TypeVar("T")


class Accepted(BaseModel, Generic[T]):
    status: Literal["accepted"] = "accepted"
    value: T


class Rejected(BaseModel):
    status: Literal["rejected"] = "rejected"
    reasons: list[str] = Field(..., min_length=1)

    @property
    def message(self) -> str:
        """All reasons joined into the single message shown to the submitter."""
        return ", ".join(self.reasons)


ValidationOutcome = Union[Accepted[T], Rejected]
