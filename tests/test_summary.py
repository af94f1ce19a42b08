from types import SimpleNamespace

from app.services.summary import summarize


def test_summarize_totals():
    payments = [
        SimpleNamespace(paid=100, balance=-20),
        SimpleNamespace(paid=50, balance=10),
    ]
    totals = summarize(payments)
    assert totals.total_paid == 150
    assert totals.total_balance == -10
    assert totals.count == 2


def test_summarize_empty():
    totals = summarize([])
    assert totals.total_paid == 0
    assert totals.total_balance == 0
    assert totals.count == 0
