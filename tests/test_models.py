"""Tests for domain models and validation messages."""

import pytest
from pydantic import ValidationError

from tooltrack.domain.models import Candidate, Entry, EntryDraft, SparePart, field_errors


def valid_fields(**overrides):
    fields = {
        "mechanic_name": " Rajesh Kumar ",
        "contact_number": "98765-43210",
        "vehicle_number": "ka01ab1234",
        "complaint_type": "Brake Issues",
        "spare_parts": [SparePart(name=" Brake Pad Set ", quantity=2)],
    }
    fields.update(overrides)
    return fields


class TestEntryDraft:
    def test_valid_draft_is_normalized(self):
        draft = EntryDraft(**valid_fields())

        assert draft.mechanic_name == "Rajesh Kumar"
        assert draft.vehicle_number == "KA01AB1234"
        assert draft.spare_parts[0].name == "Brake Pad Set"

    def test_uncounted_parts_are_dropped(self):
        parts = [
            SparePart(name="Brake Pad Set", quantity=2),
            SparePart(name="Chain Lubricant", quantity=0),
            SparePart(name="  ", quantity=3),
        ]

        draft = EntryDraft(**valid_fields(spare_parts=parts))

        assert [p.name for p in draft.spare_parts] == ["Brake Pad Set"]

    @pytest.mark.parametrize(
        "contact, message",
        [
            ("", "Contact number is required"),
            ("12345", "Please enter a valid 10-digit phone number"),
            ("98765 43210 1", "Please enter a valid 10-digit phone number"),
        ],
    )
    def test_contact_number_messages(self, contact, message):
        with pytest.raises(ValidationError) as exc_info:
            EntryDraft(**valid_fields(contact_number=contact))

        assert field_errors(exc_info.value) == {"contact_number": message}

    def test_field_errors_keeps_first_message_per_field(self):
        with pytest.raises(ValidationError) as exc_info:
            EntryDraft(**valid_fields(mechanic_name="", spare_parts=[]))

        assert field_errors(exc_info.value) == {
            "mechanic_name": "Mechanic name is required",
            "spare_parts": "At least one spare part is required",
        }

    def test_to_record(self):
        record = EntryDraft(**valid_fields()).to_record()

        assert record["vehicle_number"] == "KA01AB1234"
        assert record["spare_parts"][0]["quantity"] == 2
        assert "id" in record["spare_parts"][0]


class TestEntry:
    def test_from_record_and_total_quantity(self):
        entry = Entry.from_record(
            {
                "id": "e1",
                "mechanic_name": "Suresh Babu",
                "contact_number": "9876543211",
                "vehicle_number": "TN02CD5678",
                "complaint_type": "Engine Performance",
                "spare_parts": [{"id": "a", "name": "Engine Oil", "quantity": 2}, {"id": "b", "name": "Air Filter", "quantity": 1}],
                "created_at": "2024-01-16T14:45:00+00:00",
            }
        )

        assert entry.total_quantity == 3
        assert entry.created_at.year == 2024


def test_candidate_label():
    assert Candidate(identifier="1", display_name="Chain").label() == "Chain"
    assert Candidate(identifier="1", display_name="Chain", secondary_label="CH-1").label() == "Chain (CH-1)"


def test_spare_part_rejects_negative_quantity():
    with pytest.raises(ValidationError):
        SparePart(name="Chain", quantity=-1)
