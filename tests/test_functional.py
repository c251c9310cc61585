from cashcat.domain import Budget
from cashcat.functional import Left, Nothing, Right, Some, safe_budget

BUDGETS = (Budget("b1", "Food"), Budget("b2", "Rent"))


def test_safe_budget():
    assert safe_budget(BUDGETS, "b2") == Some(BUDGETS[1])
    assert safe_budget(BUDGETS, "zz").is_none()
    assert safe_budget(BUDGETS, None) == Nothing()
    assert safe_budget(BUDGETS, "b1").map(lambda b: b.name).get_or_else("?") == "Food"


def test_either_chains_until_left():
    ok = Right(2).map(lambda x: x * 10).bind(lambda x: Right(x + 1))
    assert ok == Right(21)

    failed = Right(2).bind(lambda x: Left(["bad"])).map(lambda x: x * 10)
    assert failed.is_left()
    assert failed.get_error() == ["bad"]
    assert failed.get_or_else(0) == 0
