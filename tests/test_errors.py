import pytest

from auctionhouse import errors


@pytest.mark.parametrize(
    ("factory", "kind"),
    [
        (errors.not_found_error, "not_found"),
        (errors.internal_server_error, "internal_server_error"),
        (errors.bad_request_error, "bad_request"),
    ],
)
def test_factories_set_kind_and_message(factory, kind):
    err = factory("something happened")
    assert err.err == kind
    assert err.message == "something happened"
    assert str(err) == "something happened"


def test_internal_error_can_be_raised_and_caught():
    err = errors.bad_request_error("invalid auction object")
    assert err.err == "bad_request"
    assert err.message == "invalid auction object"
    with pytest.raises(errors.InternalError) as info:
        raise err
    assert info.value is err
    assert str(info.value) == "invalid auction object"


def test_equality_depends_on_message_and_kind():
    assert errors.not_found_error("a") == errors.not_found_error("a")
    assert not errors.not_found_error("a") == errors.bad_request_error("a")
    assert not errors.not_found_error("a") == errors.not_found_error("b")