import pytest

from mailaddrs.address_list import AddressList
from mailaddrs.errors import InvalidArgumentError
from mailaddrs.models import Address


@pytest.fixture
def address_list():
    return AddressList()


def test_is_empty_by_default(address_list):
    assert len(address_list) == 0
    assert address_list.count() == 0
    assert list(address_list) == []


def test_adding_emails_increases_count(address_list):
    address_list.add("test@example.com")
    assert address_list.count() == 1


def test_adding_email_from_string_increases_count(address_list):
    address_list.add_from_string("test@example.com")
    assert len(address_list) == 1


def test_has_and_get_when_address_not_in_list(address_list):
    assert address_list.has("foo@example.com") is False
    assert "foo@example.com" not in address_list
    assert address_list.get("foo@example.com") is None


def test_has_returns_true_when_address_in_list(address_list):
    address_list.add("test@example.com")
    assert address_list.has("test@example.com") is True
    assert "test@example.com" in address_list


def test_add_rejects_invalid_input(address_list):
    with pytest.raises(
        InvalidArgumentError, match="add expects an email address or an Address value"
    ):
        address_list.add(None)
    with pytest.raises(InvalidArgumentError):
        address_list.add("")


def test_add_many_rejects_invalid_input(address_list):
    with pytest.raises(
        InvalidArgumentError, match="add expects an email address or an Address value"
    ):
        address_list.add_many([None])


def test_add_many_keeps_entries_added_before_failure(address_list):
    with pytest.raises(InvalidArgumentError):
        address_list.add_many(["a@example.com", 42, "b@example.com"])
    assert address_list.emails() == ["a@example.com"]


def test_get_returns_address_when_email_found(address_list):
    address_list.add("test@example.com")
    address = address_list.get("test@example.com")
    assert isinstance(address, Address)
    assert address.email == "test@example.com"


def test_can_add_address_with_name(address_list):
    address_list.add("test@example.com", "Example Test")
    address = address_list.get("test@example.com")
    assert address.email == "test@example.com"
    assert address.name == "Example Test"


def test_can_add_many_addresses_at_once(address_list):
    address_list.add_many(
        [
            "test@example.com",
            ("list@example.com", "Example List"),
            Address("announce@example.com", "Announce List"),
        ]
    )
    assert address_list.count() == 3
    assert address_list.has("test@example.com")
    assert address_list.get("list@example.com").name == "Example List"
    assert address_list.has("announce@example.com")


def test_add_many_accepts_mapping_of_email_to_name(address_list):
    address_list.add_many({"a@example.com": "A", "b@example.com": None})
    assert address_list.emails() == ["a@example.com", "b@example.com"]
    assert address_list.get("a@example.com").name == "A"
    assert address_list.get("b@example.com").name is None


def test_does_not_store_duplicates_and_first_wins(address_list):
    address_list.add_many(
        ["test@example.com", Address("test@example.com", "Example Test")]
    )
    assert address_list.count() == 1
    assert address_list.get("test@example.com").name is None

    address_list.add("test@example.com", "Another Name")
    assert address_list.count() == 1
    assert address_list.get("test@example.com").name is None


def test_add_methods_return_self_for_chaining(address_list):
    result = address_list.add("a@example.com").add_many(["b@example.com"])
    assert result is address_list
    assert address_list.add_from_string("c@example.com") is address_list


def test_loses_parens_in_name():
    address_list = AddressList.from_string('"Supports (E-mail)" <support@example.org>')
    address = address_list.get("support@example.org")
    assert address.name == "Supports"
    assert address.comment == "E-mail"
    assert address.email == "support@example.org"


def test_semicolon_separator():
    address_list = AddressList.from_string(
        "Some User <some.user@example.com>; uzer2.surname@example.org;"
        " asda.fasd@example.net, root@example.org"
    )
    assert address_list.get("some.user@example.com").name == "Some User"
    assert address_list.has("uzer2.surname@example.org")
    assert address_list.has("asda.fasd@example.net")
    assert address_list.has("root@example.org")
    assert address_list.count() == 4


def test_mixed_quotes_in_name():
    address_list = AddressList.from_string('"Bob O\'Reilly" <bob@example.com>,blah@example.com')
    assert address_list.has("bob@example.com")
    assert address_list.has("blah@example.com")
    assert address_list.get("bob@example.com").name == "Bob O'Reilly"
    assert address_list.get("blah@example.com").name is None


def test_from_string_skips_empty_segments():
    address_list = AddressList.from_string(" , a@example.com;; <> ,")
    assert address_list.emails() == ["a@example.com"]


def test_merge_two_lists(address_list):
    other = AddressList()
    address_list.add("one@example.net")
    other.add("two@example.org")
    address_list.merge(other)
    assert address_list.count() == 2
    assert address_list.emails() == ["one@example.net", "two@example.org"]


def test_merge_keeps_existing_entry_on_collision(address_list):
    other = AddressList().add("shared@example.com", "Other").add("new@example.com")
    address_list.add("shared@example.com", "Mine")
    address_list.merge(other)
    assert address_list.count() == 2
    assert address_list.get("shared@example.com").name == "Mine"


def test_delete_success(address_list):
    address_list.add("test@example.com")
    assert address_list.delete("test@example.com") is True
    assert address_list.count() == 0


def test_delete_not_exist(address_list):
    address_list.add("other@example.com")
    assert address_list.delete("test@example.com") is False
    assert address_list.count() == 1


def test_key(address_list):
    assert address_list.key() is None
    address_list.add("test@example.com")
    address_list.add("test@example.net")
    address_list.add("test@example.org")
    address_list.rewind()
    assert address_list.key() == "test@example.com"
    address_list.next()
    assert address_list.key() == "test@example.net"
    address_list.next()
    assert address_list.key() == "test@example.org"
    assert address_list.current().email == "test@example.org"
    address_list.next()
    assert address_list.valid() is False
    assert address_list.key() is None
    assert address_list.current() is None


def test_rewind_on_empty_list_is_not_valid(address_list):
    address_list.rewind()
    assert address_list.valid() is False
    assert address_list.key() is None


def test_iteration_follows_insertion_order_after_delete(address_list):
    address_list.add_many(["a@example.com", "b@example.com", "c@example.com"])
    address_list.delete("b@example.com")
    address_list.add("b@example.com")
    assert [a.email for a in address_list] == [
        "a@example.com",
        "c@example.com",
        "b@example.com",
    ]
    assert [email for email, _ in address_list.items()] == address_list.emails()


def test_to_string_renders_header_value():
    address_list = AddressList.from_string('a@example.com; "Doe, Jane" <jane@example.com> (HR)')
    assert address_list.to_string() == 'a@example.com, "Doe, Jane" <jane@example.com> (HR)'
    assert AddressList.from_string(address_list.to_string()) == address_list


def test_constructor_accepts_initial_addresses():
    address_list = AddressList(["a@example.com", ("b@example.com", "B")])
    assert address_list.emails() == ["a@example.com", "b@example.com"]
    assert repr(address_list).startswith("AddressList([Address(")


def test_cursor_sees_additions_and_deletions(address_list):
    address_list.add_many(["a@example.com", "b@example.com"])
    address_list.rewind()
    assert address_list.key() == "a@example.com"
    address_list.delete("a@example.com")
    assert address_list.key() == "b@example.com"
    address_list.add("c@example.com")
    address_list.next()
    assert address_list.key() == "c@example.com"
    address_list.next()
    assert address_list.key() is None
