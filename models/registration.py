"""
models/registration.py
----------------------
Domain model for a customer registration submitted through the sign-up form.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Registration:
    """
    Normalized registration data.

    Attributes:
        user_login: Requested account name.
        first_name: Customer's first name.
        last_name: Customer's last name.
        email: Contact address; the confirmation mail goes here.
        password: Password as entered.
        birthdate: Birth date as entered (YYYY-MM-DD).
        phone_number, address, city, country, po_box, postal_code: Contact details.
        rec_question1, answer1, rec_question2, answer2: Account recovery questions.
    """
    user_login: str
    first_name: str
    last_name: str
    email: str
    password: str = field(repr=False)
    birthdate: str
    rec_question1: str
    answer1: str = field(repr=False)
    rec_question2: str
    answer2: str = field(repr=False)
    phone_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    po_box: Optional[str] = None
    postal_code: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return f"{self.user_login} <{self.email}>"
