"""
services/registration_service.py
--------------------------------
Sign-up form handling: normalizes the submitted fields, reports missing
ones and sends the welcome mail.

Sending mail is delegated to a ``send_mail(to, subject, body, headers)``
callable supplied by the caller.
"""

import html
import textwrap
from typing import Callable, Mapping, Optional

from config import MAIL_CC, MAIL_FROM, SITE_ACCOUNT_URL
from models.registration import Registration
from utils.logger import get_logger

logger = get_logger(__name__)

SendMail = Callable[[str, str, str, dict], None]

# form field -> (Registration attribute, label, required)
FORM_FIELDS = {
    "userLogin": ("user_login", "User login", True),
    "firstName": ("first_name", "First name", True),
    "lastName": ("last_name", "Last name", True),
    "email": ("email", "Email", True),
    "password": ("password", "Password", True),
    "birthdate": ("birthdate", "Birth date", True),
    "phoneNumber": ("phone_number", "Phone number", False),
    "address": ("address", "Address", False),
    "city": ("city", "City", False),
    "country": ("country", "Country", False),
    "pobox": ("po_box", "P.O. Box", False),
    "postalcode": ("postal_code", "Postal code", False),
    "question1": ("rec_question1", "Recovery question 1", True),
    "answer1": ("answer1", "Answer 1", True),
    "question2": ("rec_question2", "Recovery question 2", True),
    "answer2": ("answer2", "Answer 2", True),
}

WELCOME_SUBJECT = "Welcome to Beaver Online"


class RegistrationService:
    """Validates sign-up forms and sends confirmation mail."""

    def __init__(self, send_mail: Optional[SendMail] = None):
        self.send_mail = send_mail

    @staticmethod
    def normalize(form: Mapping[str, object]) -> dict[str, str]:
        """Trim and HTML-escape every known form field. Missing fields become ''."""
        cleaned = {}
        for name in FORM_FIELDS:
            value = form.get(name)
            cleaned[name] = html.escape(str(value).strip()) if value is not None else ""
        return cleaned

    def validate(self, form: Mapping[str, object]) -> list[str]:
        """
        Check that every required field is filled in.

        Returns:
            One message per missing field; an empty list means valid.
        """
        cleaned = self.normalize(form)
        return [
            f"{label} is required."
            for name, (_, label, required) in FORM_FIELDS.items()
            if required and cleaned[name] == ""
        ]

    def parse(self, form: Mapping[str, object]) -> Registration:
        """
        Build a Registration from the form.

        Raises:
            ValueError: If required fields are missing (message lists them).
        """
        errors = self.validate(form)
        if errors:
            raise ValueError(" ".join(errors))
        cleaned = self.normalize(form)
        values = {attr: (cleaned[name] or None) for name, (attr, _, _) in FORM_FIELDS.items()}
        return Registration(**values)

    @staticmethod
    def confirmation_message(registration: Registration) -> str:
        """Welcome text for a new account, wrapped at 70 columns."""
        msg = (
            f"Hello {registration.first_name}, thank you for opening an account on "
            f"Beaver Industries. Please take note of your account information which "
            f"you will need to access Beaver online in future. "
            f"UserName: {registration.user_login}. If you would like to modify your "
            f"account, please visit {SITE_ACCOUNT_URL}."
        )
        return textwrap.fill(msg, width=70)

    def send_confirmation(self, registration: Registration) -> bool:
        """
        Hand the welcome mail to the configured sender.

        Returns:
            True if the mail was handed over, False when no sender is set.
        """
        if self.send_mail is None:
            logger.warning(f"No mail sender configured; skipped confirmation for {registration}")
            return False
        headers = {"From": MAIL_FROM, "CC": MAIL_CC}
        self.send_mail(
            registration.email,
            WELCOME_SUBJECT,
            self.confirmation_message(registration),
            headers,
        )
        logger.info(f"Sent registration confirmation to {registration.email}")
        return True
