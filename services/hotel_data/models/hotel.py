"""
Hotel and address value types.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class Address(BaseModel):
    """Address of a hotel in the USA."""
    model_config = ConfigDict(frozen=True)

    street_address: str
    city: str
    state: str
    latitude: float
    longitude: float

    def render(self) -> str:
        """
        Street address on the first line, "city, state" on the second.

        Example:
            17 Green st.
            San Francisco, CA
        """
        return f"{self.street_address}\n{self.city}, {self.state}"


class Hotel(BaseModel):
    """
    A hotel. Hotels order by name, then by hotel_id.

    Does not hold reviews; the store keeps those separately.
    """
    model_config = ConfigDict(frozen=True)

    hotel_id: str
    hotel_name: str
    address: Optional[Address] = None

    @property
    def sort_key(self) -> Tuple[str, str]:
        return (self.hotel_name, self.hotel_id)

    def compare(self, other: "Hotel") -> int:
        """Return -1, 0 or 1 comparing name first, hotel_id second."""
        if self.sort_key < other.sort_key:
            return -1
        if self.sort_key > other.sort_key:
            return 1
        return 0

    def __lt__(self, other: "Hotel") -> bool:
        return self.compare(other) < 0

    def render(self) -> str:
        """
        Render as:
            hotelName: hotelId
            streetAddress
            city, state

        A hotel without an address renders the first line only.
        """
        header = f"{self.hotel_name}: {self.hotel_id}"
        if self.address is None:
            return header
        return f"{header}\n{self.address.render()}"
