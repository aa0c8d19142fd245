"""Tests for the contact form."""

from unittest.mock import MagicMock

import pytest

from epropulse.clients import APIError
from epropulse.contact import (
    DEFAULT_MESSAGE,
    LEADS_COLLECTION,
    PREDEFINED_MESSAGES,
    SpamPolicy,
    build_lead,
    initial_message,
    submit_lead,
    validate_step,
)


@pytest.fixture
def form():
    return {
        "name": "Koffi Mensah",
        "email": "koffi@example.com",
        "phone": "+229 97 00 00 00",
        "service": "chatbot-whatsapp",
        "message": "",
        "budget_min": "150000",
        "budget_max": "300000 FCFA",
        "deadline": "2026-12-01",
        "contact_preference": "whatsapp",
        "urgency": "high",
    }


class TestSteps:
    """Tests for validate_step() and initial_message()."""

    def test_complete_steps(self, form):
        assert validate_step(1, form) is None
        assert validate_step(2, form) is None
        assert validate_step(3, form) is None

    def test_missing_identity(self, form):
        form["phone"] = "  "

        assert validate_step(1, form) == "Merci de remplir vos informations personnelles."

    def test_missing_budget(self, form):
        del form["deadline"]

        assert validate_step(2, form) == "Merci de remplir le budget et la date limite."

    def test_initial_message(self):
        assert initial_message("livre") == PREDEFINED_MESSAGES["livre"]
        assert initial_message(None) == DEFAULT_MESSAGE
        assert initial_message("inconnu") == DEFAULT_MESSAGE
        assert len(PREDEFINED_MESSAGES) == 10


class TestSpamPolicy:
    """Tests for SpamPolicy."""

    def test_honeypot(self, form):
        form["website"] = "https://spam.example"

        assert SpamPolicy().is_spam(form)

    def test_too_fast(self, form):
        assert SpamPolicy().is_spam(form, started_at=100.0, now=101.5)
        assert not SpamPolicy().is_spam(form, started_at=100.0, now=110.0)

    def test_no_timing(self, form):
        """Without a start time only the honeypot is checked."""
        assert not SpamPolicy().is_spam(form)


class TestBuildLead:
    """Tests for build_lead()."""

    def test_fields(self, form):
        lead = build_lead(form)

        assert lead.name == "Koffi Mensah"
        assert lead.budget_min == 150000
        assert lead.budget_max == 300000
        assert lead.contact_preference == "whatsapp"
        assert lead.status == "new"

    def test_empty_message_uses_service_message(self, form):
        assert build_lead(form).message == PREDEFINED_MESSAGES["chatbot-whatsapp"]

    @pytest.mark.parametrize("value", ["", None, "environ", "-"])
    def test_unparseable_budget(self, form, value):
        form["budget_max"] = value

        assert build_lead(form).budget_max is None

    def test_defaults(self, form):
        del form["contact_preference"]
        del form["urgency"]

        lead = build_lead(form)

        assert lead.contact_preference == "any"
        assert lead.urgency == "medium"


class TestSubmitLead:
    """Tests for submit_lead()."""

    def test_inserts_lead(self, form):
        client = MagicMock()

        lead = submit_lead(client, form, started_at=0.0, now=30.0)

        client.insert.assert_called_once()
        collection, rows = client.insert.call_args.args
        assert collection == LEADS_COLLECTION
        assert rows[0]["email"] == "koffi@example.com"
        assert rows[0]["urgency"] == "high"
        assert isinstance(rows[0]["created_at"], str)
        assert lead.email == "koffi@example.com"

    def test_incomplete_step(self, form):
        client = MagicMock()
        form["budget_min"] = ""

        with pytest.raises(ValueError, match="budget"):
            submit_lead(client, form)

        client.insert.assert_not_called()

    def test_spam_is_dropped(self, form):
        client = MagicMock()
        form["website"] = "x"

        assert submit_lead(client, form) is None
        client.insert.assert_not_called()

    def test_invalid_choice(self, form):
        """Unsupported choices are reported as ValueError."""
        form["urgency"] = "yesterday"

        with pytest.raises(ValueError, match="Invalid contact form"):
            submit_lead(MagicMock(), form)

    def test_store_error_propagates(self, form):
        client = MagicMock()
        client.insert.side_effect = APIError("unavailable", status_code=503)

        with pytest.raises(APIError):
            submit_lead(client, form)
