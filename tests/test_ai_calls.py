import pytest

from maxfit.errors import NotFoundError
from maxfit.services.ai_calls import check_call_allowance, record_ai_call


def test_allowance_always_granted_when_limits_disabled():
    allowance = check_call_allowance({"aiCallsUsed": 9, "maxAiCalls": 5}, limits_enabled=False)

    assert allowance.canMakeCall is True
    assert allowance.message == ""


def test_unlimited_plan_is_allowed():
    allowance = check_call_allowance({"aiCallsUsed": 500, "maxAiCalls": -1}, limits_enabled=True)

    assert allowance.canMakeCall is True


def test_exhausted_allowance_is_refused():
    allowance = check_call_allowance({"aiCallsUsed": 5, "maxAiCalls": 5}, limits_enabled=True)

    assert allowance.canMakeCall is False
    assert allowance.message == "You've used 5 of 5 AI calls. Please upgrade your plan to get more calls."


def test_missing_limit_defaults_to_one_call():
    assert check_call_allowance({}, limits_enabled=True).canMakeCall is True
    assert check_call_allowance({"aiCallsUsed": 1}, limits_enabled=True).canMakeCall is False


def test_record_increments_when_enabled(make_account, mongo):
    make_account(email="a@x.com")

    assert record_ai_call("a@x.com", limits_enabled=True) == 1
    assert record_ai_call("a@x.com", limits_enabled=True) == 2
    assert mongo["users"].find_one({"email": "a@x.com"})["aiCallsUsed"] == 2


def test_record_is_noop_when_disabled(make_account, mongo):
    make_account(email="a@x.com")

    assert record_ai_call("a@x.com", limits_enabled=False) == 0
    assert mongo["users"].find_one({"email": "a@x.com"})["aiCallsUsed"] == 0


@pytest.mark.parametrize("enabled", [True, False])
def test_record_unknown_user(enabled):
    with pytest.raises(NotFoundError):
        record_ai_call("ghost@x.com", limits_enabled=enabled)
