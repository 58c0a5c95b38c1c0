import pytest

from src.checkout import InsufficientStock, check_stock


def test_enough_stock_passes():
    assert check_stock(3, 5) is None
    assert check_stock(5, 5, product_id=1) is None


def test_short_stock_reports_available():
    shortage = check_stock(2, 1, product_id=7)

    assert isinstance(shortage, InsufficientStock)
    assert shortage.product_id == 7
    assert shortage.available == 1
    assert shortage.requested == 2
    assert shortage.to_dict()["code"] == "INSUFFICIENT_STOCK"


def test_negative_available_is_reported_as_zero():
    shortage = check_stock(1, -3, product_id=2)
    assert shortage.available == 0


@pytest.mark.parametrize("requested", [0, -1])
def test_non_positive_request_is_rejected(requested):
    with pytest.raises(ValueError):
        check_stock(requested, 10)
