"""Property-based tests for phone directory models."""

import json

import pytest
from hypothesis import given, strategies as st
from pydantic import ValidationError as PydanticValidationError

from phone_directory.models import DirectorySnapshot, PhoneNumber, PhoneType, Subscriber


# Generator for names made of letters only
def name_strategy():
    """Generate non-empty alphabetic names."""
    return st.text(
        alphabet=st.characters(whitelist_categories=('Lu', 'Ll')),
        min_size=1,
        max_size=20
    )


# Generator for raw digit-only phone numbers
def phone_number_strategy():
    """Generate phone numbers of 5-15 digits."""
    return st.text(alphabet="0123456789", min_size=5, max_size=15)


def phone_type_strategy():
    return st.sampled_from(list(PhoneType))


class TestPhoneType:
    """Test the phone type enumeration."""

    def test_labels_in_declaration_order(self):
        assert PhoneType.labels() == ["Mobile", "Home", "Work", "Fax", "Other"]

    @pytest.mark.parametrize("phone_type", list(PhoneType))
    def test_from_label_round_trip(self, phone_type):
        assert PhoneType.from_label(phone_type.label) is phone_type

    @pytest.mark.parametrize("label", ["mobile", "MOBILE", "Pager", "", None])
    def test_from_label_unknown_returns_none(self, label):
        assert PhoneType.from_label(label) is None

    def test_str_is_label(self):
        assert str(PhoneType.FAX) == "Fax"

    def test_matches_name_and_label_case_insensitively(self):
        assert PhoneType.MOBILE.matches("MOBILE")
        assert PhoneType.MOBILE.matches("mob")
        assert PhoneType.WORK.matches("ork")
        assert not PhoneType.HOME.matches("mobile")


class TestPhoneNumber:
    """Test phone number value semantics."""

    @given(phone_number_strategy(), phone_type_strategy())
    def test_value_equality(self, number, phone_type):
        """
        **Feature: phone-directory, Property 1: Phone number value equality**

        Two phone numbers built from the same number and type are equal and
        hash alike.
        """
        first = PhoneNumber(number=number, type=phone_type)
        second = PhoneNumber(number=number, type=phone_type)

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_different_type_is_not_equal(self):
        assert PhoneNumber(number="12345", type=PhoneType.HOME) != PhoneNumber(number="12345", type=PhoneType.WORK)

    def test_number_is_stored_raw(self):
        phone = PhoneNumber(number=" +7 (900) 123-45-67 ", type=PhoneType.MOBILE)
        assert phone.number == " +7 (900) 123-45-67 "

    def test_is_frozen(self):
        phone = PhoneNumber(number="12345", type=PhoneType.HOME)
        with pytest.raises(PydanticValidationError):
            phone.number = "54321"

    def test_contains(self):
        phone = PhoneNumber(number="+7 900 123", type=PhoneType.MOBILE)
        assert phone.contains("900")
        assert not phone.contains("555")

    @pytest.mark.parametrize("number,expected", [
        ("+7 (900) 123-45-67", True),
        ("12345", True),
        ("", False),
        ("   ", False),
        ("12a45", False),
    ])
    def test_is_valid(self, number, expected):
        assert PhoneNumber(number=number, type=PhoneType.OTHER).is_valid() is expected

    def test_formatted(self):
        phone = PhoneNumber(number="12345", type=PhoneType.WORK)
        assert phone.formatted == "12345 (Work)"
        assert str(phone) == "12345 (Work)"


class TestSubscriber:
    """Test subscriber identity, ordering and search."""

    @given(name_strategy(), name_strategy())
    def test_identity_equality(self, last_name, first_name):
        """
        **Feature: phone-directory, Property 2: Subscriber identity equality**

        Subscribers with identical names but different ids are distinct; a copy
        carrying the same id is equal.
        """
        first = Subscriber(last_name=last_name, first_name=first_name)
        second = Subscriber(last_name=last_name, first_name=first_name)

        assert first != second
        assert first.id != second.id
        assert first == first.model_copy(deep=True)
        assert len({first, second}) == 2

    def test_id_is_immutable(self):
        subscriber = Subscriber(last_name="Smith", first_name="John")
        with pytest.raises(PydanticValidationError):
            subscriber.id = "other"

    def test_rename_keeps_id(self):
        subscriber = Subscriber(last_name="Smith", first_name="John")
        original_id = subscriber.id

        subscriber.rename("Jones", "Jack", None)

        assert subscriber.id == original_id
        assert subscriber.last_name == "Jones"
        assert subscriber.middle_name == ""

    @pytest.mark.parametrize("middle_name", [None, ""])
    def test_absent_middle_name(self, middle_name):
        subscriber = Subscriber(last_name="Smith", first_name="John", middle_name=middle_name)
        assert subscriber.middle_name == ""
        assert subscriber.full_name == "Smith John"

    def test_full_name(self):
        subscriber = Subscriber(last_name="Smith", first_name="John", middle_name="Paul")
        assert subscriber.full_name == "Smith John Paul"
        assert str(subscriber) == "Smith John Paul"

    def test_natural_ordering(self):
        smith_b = Subscriber(last_name="Smith", first_name="John", middle_name="B")
        smith_a = Subscriber(last_name="smith", first_name="john", middle_name="a")
        adams = Subscriber(last_name="Adams", first_name="John", middle_name="C")

        assert sorted([smith_b, smith_a, adams]) == [adams, smith_a, smith_b]

    def test_rich_comparisons(self):
        smith = Subscriber(last_name="Smith", first_name="John")
        same_name = Subscriber(last_name="SMITH", first_name="john")
        adams = Subscriber(last_name="Adams", first_name="John")

        assert adams < smith and adams <= smith
        assert smith > adams and smith >= adams
        assert smith <= same_name and smith >= same_name
        assert not smith < same_name
        assert max([adams, smith]) is smith

    def test_phone_numbers_are_a_set_in_insertion_order(self):
        subscriber = Subscriber(last_name="Smith", first_name="John")
        work = PhoneNumber(number="11111", type=PhoneType.WORK)
        home = PhoneNumber(number="22222", type=PhoneType.HOME)

        assert subscriber.add_phone_number(work)
        assert subscriber.has_phone_number(PhoneNumber(number="11111", type=PhoneType.WORK))
        assert not subscriber.has_phone_number(home)
        assert subscriber.add_phone_number(home)
        assert not subscriber.add_phone_number(PhoneNumber(number="11111", type=PhoneType.WORK))
        assert subscriber.phone_numbers == [work, home]

        assert subscriber.remove_phone_number(PhoneNumber(number="11111", type=PhoneType.WORK))
        assert not subscriber.remove_phone_number(work)
        assert subscriber.phone_numbers == [home]

    @pytest.mark.parametrize("query", [
        "smi", "JOHN", "paul", "smith john", "Smith John Paul",
        "900", "mobile", "MOBILE", "Mob", "obi",
    ])
    def test_contains_matches(self, query):
        subscriber = Subscriber(last_name="Smith", first_name="John", middle_name="Paul")
        subscriber.add_phone_number(PhoneNumber(number="+7 900 1234", type=PhoneType.MOBILE))

        assert subscriber.contains(query)

    @pytest.mark.parametrize("query", ["Adams", "555", "fax", "home"])
    def test_contains_rejects(self, query):
        subscriber = Subscriber(last_name="Smith", first_name="John", middle_name="Paul")
        subscriber.add_phone_number(PhoneNumber(number="+7 900 1234", type=PhoneType.MOBILE))

        assert not subscriber.contains(query)

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_blank_query_matches_everything(self, query):
        assert Subscriber(last_name="Smith", first_name="John").contains(query)

    def test_contains_trims_query(self):
        assert Subscriber(last_name="Smith", first_name="John").contains("  smith  ")

    def test_is_valid(self):
        assert Subscriber(last_name="Smith", first_name="John").is_valid()
        assert not Subscriber(last_name=" ", first_name="John").is_valid()


@given(st.lists(st.tuples(name_strategy(), name_strategy(), phone_number_strategy(), phone_type_strategy()), max_size=5))
def test_snapshot_json_preserves_subscribers(rows):
    """
    **Feature: phone-directory, Property 3: Snapshot serialization**

    A snapshot written to JSON and read back keeps ids, names and phone
    numbers of every subscriber in order.
    """
    subscribers = []
    for last_name, first_name, number, phone_type in rows:
        subscriber = Subscriber(last_name=last_name, first_name=first_name)
        subscriber.add_phone_number(PhoneNumber(number=number, type=phone_type))
        subscribers.append(subscriber)

    json_str = DirectorySnapshot(subscribers=subscribers).model_dump_json()
    assert isinstance(json.loads(json_str), dict)

    restored = DirectorySnapshot.model_validate_json(json_str)

    assert [s.id for s in restored.subscribers] == [s.id for s in subscribers]
    for original, copy in zip(subscribers, restored.subscribers):
        assert copy.last_name == original.last_name
        assert copy.first_name == original.first_name
        assert copy.phone_numbers == original.phone_numbers
