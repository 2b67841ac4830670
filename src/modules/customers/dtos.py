"""Customer DTOs for the Service Layer.

- ``RegisterCustomerDTO``: input for customer registration.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class RegisterCustomerDTO(BaseModel):
    """Immutable DTO for customer registration.

    Validates:
    - ``name`` is not blank.
    - ``email`` is a well-formed address (Pydantic ``EmailStr``).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    email: EmailStr
    phone: str = ""
    address: str = ""
    user_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, v: str) -> str:
        return v.lower()
