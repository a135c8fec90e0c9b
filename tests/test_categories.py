import pytest
from groupledger.services.categories import CATEGORY_EMOJI, KEYWORD_CATEGORIES, categorize_expense, category_emoji

@pytest.mark.parametrize("description,expected", [
    ("Dinner at Luigi's", "Food & Dining"),
    ("Uber to the airport", "Transportation"),
    ("Netflix subscription", "Entertainment"),
    ("Monthly WIFI", "Utilities"),
    ("something else", "Other"),
    ("   ", "Other"),
    ("", "Other"),
])
def test_categorize_expense(description, expected):
    assert categorize_expense(description) == expected

def test_emoji_lookup():
    assert category_emoji("Rent") == "🏠"
    assert category_emoji("Uncategorized") == "💵"

def test_tables_are_read_only():
    with pytest.raises(TypeError):
        KEYWORD_CATEGORIES["bitcoin"] = "Business"
    with pytest.raises(TypeError):
        CATEGORY_EMOJI["Other"] = "?"
