from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Annotated, List, Optional, Literal, Union

# Collections:
# - category
# - game
# - reservation

ReservationStatus = Literal["Pending", "Cancelled", "Completed"]
UserStatus = Literal["Good", "Bad"]
Number = Union[int, float]
ObjectIdStr = Annotated[str, Field(pattern=r"^[0-9a-fA-F]{24}$")]


class Category(BaseModel):
    name: Optional[str] = None


class Game(BaseModel):
    id: Optional[int] = None  # numeric, sequenced by the caller via /games/last-id
    name: Optional[str] = None
    imageUrl: Optional[str] = None
    # references to category._id, not enforced
    categoryIds: List[ObjectIdStr] = []


class Reservation(BaseModel):
    adultName: Optional[str] = None
    kidName: Optional[str] = None
    phone: Optional[str] = None
    adultAge: Optional[Number] = None
    kidAge: Optional[Number] = None
    bookingDate: Optional[str] = None  # free text, no calendar checks
    bookingHour: Optional[str] = None
    duration: Optional[Number] = None
    games: List[str] = []  # game names, not game records
    status: ReservationStatus = "Pending"
    review: Optional[str] = None
    userStatus: UserStatus = "Good"
    price: Optional[Number] = None


# Partial updates: only members present in the request are written

class StatusUpdate(BaseModel):
    status: Optional[ReservationStatus] = None
    price: Optional[Number] = None


class UserStatusUpdate(BaseModel):
    userStatus: Optional[UserStatus] = None


class ReviewUpdate(BaseModel):
    review: Optional[str] = None
