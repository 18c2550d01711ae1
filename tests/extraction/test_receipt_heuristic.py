"""Tests for the line-oriented receipt fallback parser."""

from __future__ import annotations

from pantrychef.extraction.receipt_heuristic import ReceiptLineHeuristic


def test_name_and_amount_line_yields_item():
    items = ReceiptLineHeuristic().extract("Milk 3.99")

    assert len(items) == 1
    milk = items[0]
    assert milk.name == "Milk"
    assert milk.quantity == "1"
    assert milk.category == "other"
    assert milk.price is None


def test_dollar_amount_sets_price():
    items = ReceiptLineHeuristic().extract("Eggs $2.49")

    assert [(item.name, item.price) for item in items] == [("Eggs", "$2.49")]


def test_summary_lines_are_skipped():
    text = """
FRESH MART
Bread 2.50
SUBTOTAL 2.50
Tax 0.20
TOTAL 42.10
Cash $50.00
card 4.00
Receipt 1
"""
    items = ReceiptLineHeuristic().extract(text)

    assert [item.name for item in items] == ["Bread"]


def test_summary_token_inside_longer_name_is_kept():
    items = ReceiptLineHeuristic().extract("Total Wine Merlot 9.99")

    assert [item.name for item in items] == ["Total Wine Merlot"]


def test_short_names_are_rejected():
    assert ReceiptLineHeuristic().extract("Ab 1.00\nx $3.00") == []


def test_line_matching_both_patterns_yields_two_items():
    items = ReceiptLineHeuristic().extract("Oranges $4.00 Oranges 3")

    assert [(item.name, item.price) for item in items] == [
        ("Oranges", None),
        ("Oranges", "$4.00"),
    ]


def test_dedupe_policy_keeps_first_item_per_name():
    text = "Oranges $4.00 Oranges 3\nORANGES 2.00\nApples 1.25"
    items = ReceiptLineHeuristic(dedupe=True).extract(text)

    assert [(item.name, item.price) for item in items] == [("Oranges", None), ("Apples", None)]


def test_output_is_capped_at_twenty_items():
    text = "\n".join(f"Produce item {index}.99" for index in range(60))
    items = ReceiptLineHeuristic().extract(text)

    assert len(items) == 20
    assert items[0].price is None


def test_custom_cap_preserves_encounter_order():
    text = "Apples 1.00\nBananas 2.00\nCherries 3.00"
    items = ReceiptLineHeuristic(max_items=2).extract(text)

    assert [item.name for item in items] == ["Apples", "Bananas"]


def test_empty_and_blank_input_yield_nothing():
    heuristic = ReceiptLineHeuristic()

    assert heuristic.extract("") == []
    assert heuristic.extract("   \n\n\t\n") == []
    assert heuristic.extract("12345\n$$$ ---") == []
