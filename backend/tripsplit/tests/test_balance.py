"""
Tests for balance aggregation and expense summaries.
"""
import logging
import random
from decimal import Decimal
from tripsplit.schemas.expense import Expense, ExpenseCategory, ExpenseSplit
from tripsplit.schemas.user import Member
from tripsplit.services.balance_service import (
    aggregate_balances, find_unknown_members, summarize_expenses
)
from tripsplit.services.split_service import split_equally

ROSTER = [
    Member(user_id="A", display_name="Alice"),
    Member(user_id="B", display_name="Bob"),
    Member(user_id="C", display_name="Carol"),
]


def make_expense(expense_id, paid_by, amount, participants, **kwargs):
    return Expense(
        id=expense_id,
        title=f"Expense {expense_id}",
        amount=Decimal(amount),
        paid_by=paid_by,
        split_among=split_equally(Decimal(amount), participants),
        **kwargs
    )


def scenario_expenses():
    return [
        make_expense("e1", "A", "300", ["A", "B", "C"]),
        make_expense("e2", "B", "90", ["A", "B"]),
    ]


def test_aggregate_balances_scenario():
    """Test the three-member worked example."""
    balances = {b.user_id: b for b in aggregate_balances(scenario_expenses(), ROSTER)}

    assert balances["A"].total_paid == Decimal("300")
    assert balances["A"].total_owed == Decimal("145")
    assert balances["A"].balance == Decimal("155")
    assert balances["B"].balance == Decimal("-55")
    assert balances["C"].total_paid == Decimal("0")
    assert balances["C"].balance == Decimal("-100")
    assert balances["A"].display_name == "Alice"


def test_aggregate_balances_keeps_roster_order_and_idle_members():
    """Test that members without activity are reported with zero balances."""
    roster = ROSTER + [Member(user_id="D", display_name="Dave")]
    balances = aggregate_balances(scenario_expenses(), roster)

    assert [b.user_id for b in balances] == ["A", "B", "C", "D"]
    assert balances[3].total_paid == 0
    assert balances[3].total_owed == 0
    assert balances[3].balance == 0


def test_aggregate_balances_empty():
    """Test that no expenses means everyone is settled."""
    balances = aggregate_balances([], ROSTER)
    assert len(balances) == 3
    assert all(b.balance == 0 for b in balances)


def test_payer_outside_split():
    """Test that paying entirely for others gives a positive balance."""
    expenses = [make_expense("e1", "A", "60", ["B", "C"])]
    balances = {b.user_id: b for b in aggregate_balances(expenses, ROSTER)}

    assert balances["A"].balance == Decimal("60")
    assert balances["A"].total_owed == 0
    assert balances["B"].balance == Decimal("-30")


def test_unknown_member_is_kept_with_warning(caplog):
    """Test that a user missing from the roster is reported, not dropped."""
    expenses = [make_expense("e1", "A", "90", ["A", "B", "X"])]

    assert find_unknown_members(expenses, ROSTER) == ["X"]

    with caplog.at_level(logging.WARNING):
        balances = aggregate_balances(expenses, ROSTER)

    assert "X" in caplog.text
    assert balances[-1].user_id == "X"
    assert balances[-1].is_member is False
    assert balances[-1].balance == Decimal("-30")
    assert sum(b.balance for b in balances) == 0


def test_balance_conservation():
    """Test that balances always sum to zero for well-formed expenses."""
    rng = random.Random(42)
    roster = [Member(user_id=f"m{i}", display_name=f"Member {i}") for i in range(12)]
    ids = [m.user_id for m in roster]

    expenses = []
    for i in range(200):
        cents = rng.randint(1, 500000)
        participants = rng.sample(ids, rng.randint(1, len(ids)))
        expenses.append(make_expense(f"e{i}", rng.choice(ids), Decimal(cents) / 100, participants))

    balances = aggregate_balances(expenses, roster)
    assert sum(b.balance for b in balances) == 0
    assert sum(b.total_paid for b in balances) == sum(e.amount for e in expenses)


def test_aggregate_balances_is_idempotent():
    """Test that the same snapshot gives the same balances."""
    expenses = scenario_expenses()
    assert aggregate_balances(expenses, ROSTER) == aggregate_balances(expenses, ROSTER)


def test_summarize_expenses():
    """Test totals, category breakdown and main currency."""
    expenses = [
        make_expense("e1", "A", "300", ["A", "B", "C"], category=ExpenseCategory.ACCOMMODATION, currency="JPY"),
        make_expense("e2", "B", "100", ["A", "B"], category=ExpenseCategory.FOOD, currency="JPY"),
        make_expense("e3", "C", "50", ["A", "C"], category=ExpenseCategory.FOOD, currency="USD"),
    ]
    summary = summarize_expenses(expenses, ROSTER)

    assert summary.currency == "JPY"
    assert summary.total_amount == Decimal("400")
    assert [item.category for item in summary.by_category] == [
        ExpenseCategory.ACCOMMODATION, ExpenseCategory.FOOD
    ]
    assert summary.by_category[0].percentage == 75.0
    assert summary.by_category[1].expense_count == 1
    assert len(summary.by_payer) == 3

    # Member balances follow the main currency too
    by_payer = {b.user_id: b.balance for b in summary.by_payer}
    assert by_payer == {"A": Decimal("150"), "B": Decimal("-50"), "C": Decimal("-100")}


def test_summarize_expenses_empty():
    """Test the summary of a trip without expenses."""
    summary = summarize_expenses([], ROSTER)
    assert summary.total_amount == 0
    assert summary.currency == "TWD"
    assert summary.by_category == []
    assert all(b.balance == 0 for b in summary.by_payer)


def test_explicit_splits():
    """Test that hand-entered split amounts are used as given."""
    expense = Expense(
        id="e1", title="Taxi", amount=Decimal("25.50"), paid_by="C",
        split_among=[
            ExpenseSplit(user_id="A", amount=Decimal("10.25")),
            ExpenseSplit(user_id="C", amount=Decimal("15.25")),
        ]
    )
    balances = {b.user_id: b for b in aggregate_balances([expense], ROSTER)}
    assert balances["A"].balance == Decimal("-10.25")
    assert balances["C"].balance == Decimal("10.25")
    assert balances["B"].balance == 0


def test_split_gap_within_tolerance_goes_to_largest_share():
    """Test that a one-cent split gap is charged to the largest share."""
    expenses = [
        Expense(id="e1", title="Dinner", amount=Decimal("100"), paid_by="A", split_among=[
            ExpenseSplit(user_id="B", amount=Decimal("50")),
            ExpenseSplit(user_id="C", amount=Decimal("49.99")),
        ]),
        Expense(id="e2", title="Taxi", amount=Decimal("20"), paid_by="A", split_among=[
            ExpenseSplit(user_id="C", amount=Decimal("10.01")),
            ExpenseSplit(user_id="B", amount=Decimal("10")),
        ]),
    ]
    balances = {b.user_id: b for b in aggregate_balances(expenses, ROSTER)}

    assert balances["B"].total_owed == Decimal("60.01")
    assert balances["C"].total_owed == Decimal("59.99")
    assert sum(b.balance for b in balances.values()) == 0


def test_split_gap_on_tie_goes_to_lowest_user_id():
    """Test that equal shares resolve the gap in user id order."""
    expense = Expense(id="e1", title="Tickets", amount=Decimal("40.01"), paid_by="C", split_among=[
        ExpenseSplit(user_id="B", amount=Decimal("20")),
        ExpenseSplit(user_id="A", amount=Decimal("20")),
    ])
    balances = {b.user_id: b for b in aggregate_balances([expense], ROSTER)}

    assert balances["A"].total_owed == Decimal("20.01")
    assert balances["B"].total_owed == Decimal("20")


def test_split_gap_beyond_tolerance_is_kept():
    """Test that larger gaps are left for the settlement check to report."""
    expense = Expense(id="e1", title="Dinner", amount=Decimal("100"), paid_by="A", split_among=[
        ExpenseSplit(user_id="A", amount=Decimal("40")),
        ExpenseSplit(user_id="B", amount=Decimal("40")),
    ])
    balances = aggregate_balances([expense], ROSTER)
    assert sum(b.balance for b in balances) == Decimal("20")
