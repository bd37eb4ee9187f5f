from __future__ import annotations

import pytest

from services.registration_service import WELCOME_SUBJECT, RegistrationService

FORM = {
    "userLogin": "  wambui ",
    "firstName": "Wambui",
    "lastName": "Ngotha",
    "email": "wambui@example.com",
    "password": "s3cret",
    "birthdate": "1990-04-14",
    "phoneNumber": "",
    "address": "Moi Avenue",
    "city": "Nairobi",
    "country": "Kenya",
    "pobox": "",
    "postalcode": "00100",
    "question1": "What primary school did you attend?",
    "answer1": "Hill <School>",
    "question2": "Favourite colour?",
    "answer2": "Blue",
}


def test_normalize_trims_and_escapes():
    cleaned = RegistrationService.normalize(FORM)
    assert cleaned["userLogin"] == "wambui"
    assert cleaned["answer1"] == "Hill &lt;School&gt;"


def test_valid_form_has_no_errors():
    assert RegistrationService().validate(FORM) == []


def test_missing_required_fields_are_reported():
    form = dict(FORM, email="   ", lastName=None)
    form.pop("answer2")
    errors = RegistrationService().validate(form)
    assert errors == ["Last name is required.", "Email is required.", "Answer 2 is required."]


def test_parse_builds_registration():
    reg = RegistrationService().parse(FORM)
    assert reg.user_login == "wambui"
    assert reg.phone_number is None
    assert reg.postal_code == "00100"
    assert reg.full_name == "Wambui Ngotha"


def test_parse_rejects_invalid_form():
    with pytest.raises(ValueError):
        RegistrationService().parse({})


def test_confirmation_message_is_wrapped():
    reg = RegistrationService().parse(FORM)
    msg = RegistrationService.confirmation_message(reg)
    assert "UserName: wambui" in msg
    assert all(len(line) <= 70 for line in msg.splitlines())


def test_send_confirmation_uses_injected_sender():
    sent = []
    service = RegistrationService(lambda *args: sent.append(args))
    reg = service.parse(FORM)
    assert service.send_confirmation(reg) is True
    to, subject, body, headers = sent[0]
    assert to == "wambui@example.com"
    assert subject == WELCOME_SUBJECT
    assert "From" in headers and "CC" in headers


def test_send_confirmation_without_sender():
    service = RegistrationService()
    assert service.send_confirmation(service.parse(FORM)) is False


def test_repr_hides_password_and_answers():
    text = repr(RegistrationService().parse(FORM))
    assert "s3cret" not in text
    assert "Hill" not in text and "Blue" not in text
    assert "wambui" in text
