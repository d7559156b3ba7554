"""Tests for the rule-based categorization engine."""

import pytest

from spendtrack.domain.categorization import (
    DEFAULT_CATEGORY_ID,
    CategorizationEngine,
    match_pattern,
    order_rules,
)
from spendtrack.domain.entities import MatchType, Rule


def test_no_rules_returns_default(engine):
    """Test the fallback category when nothing matches."""
    assert engine.categorize("ANYTHING") == DEFAULT_CATEGORY_ID


def test_categorize_is_deterministic(temp_db, engine):
    """Test repeated calls over unchanged rules agree."""
    temp_db.create_rule(1, "ZOMATO", MatchType.CONTAINS, priority=100)
    temp_db.create_rule(3, "AMAZON", MatchType.CONTAINS, priority=100)

    results = {engine.categorize("UPI-ZOMATO LTD") for _ in range(5)}

    assert results == {1}


@pytest.mark.parametrize("cafe_first", [True, False])
def test_priority_beats_insertion_order(temp_db, engine, cafe_first):
    """Test higher priority wins regardless of which rule was added first."""
    if cafe_first:
        temp_db.create_rule(10, "CAFE", MatchType.CONTAINS, priority=100)
        temp_db.create_rule(20, "RESTAURANT", MatchType.CONTAINS, priority=90)
    else:
        temp_db.create_rule(20, "RESTAURANT", MatchType.CONTAINS, priority=90)
        temp_db.create_rule(10, "CAFE", MatchType.CONTAINS, priority=100)

    assert engine.categorize("CAFE RESTAURANT") == 10


def test_equal_priority_uses_lowest_rule_id(temp_db, engine):
    """Test ties are broken by insertion order."""
    temp_db.create_rule(4, "MOBILE", MatchType.CONTAINS, priority=100)
    temp_db.create_rule(3, "AMAZON", MatchType.CONTAINS, priority=100)

    assert engine.categorize("AMAZON MOBILE RECHARGE") == 4


def test_inactive_rules_are_ignored(temp_db, engine):
    """Test disabled rules never match."""
    temp_db.create_rule(1, "ZOMATO", MatchType.CONTAINS, priority=100, is_active=False)

    assert engine.categorize("ZOMATO") == DEFAULT_CATEGORY_ID


def test_categorize_many_matches_categorize(temp_db, engine):
    """Test the batch variant gives the same answers."""
    temp_db.create_rule(1, "SWIGGY", MatchType.CONTAINS, priority=100)
    temp_db.create_rule(2, "UBER", MatchType.STARTS_WITH, priority=100)
    merchants = ["SWIGGY ORDER", "UBER TRIP", "MY UBER", "UNKNOWN"]

    assert engine.categorize_many(merchants) == [engine.categorize(m) for m in merchants]
    assert engine.categorize_many(merchants) == [1, 2, DEFAULT_CATEGORY_ID, DEFAULT_CATEGORY_ID]


@pytest.mark.parametrize(
    "merchant,pattern,match_type,expected",
    [
        ("ZOMATO BANGALORE", "ZOMATO", MatchType.CONTAINS, True),
        ("ZOMATO BANGALORE", "ZOMATO", MatchType.EXACT, False),
        ("zomato", "ZOMATO", MatchType.EXACT, True),
        ("zomato bangalore", "Zomato", MatchType.CONTAINS, True),
        ("UBER TRIP", "uber", MatchType.STARTS_WITH, True),
        ("MY UBER", "UBER", MatchType.STARTS_WITH, False),
        ("PAYMENT NETFLIX", "netflix", MatchType.ENDS_WITH, True),
        ("NETFLIX PAYMENT", "NETFLIX", MatchType.ENDS_WITH, False),
        ("Uber India", r"^uber\s", MatchType.REGEX, True),
        ("India Uber", r"^uber", MatchType.REGEX, False),
        ("POS 1234 AMAZON", r"AMA?ZON", MatchType.REGEX, True),
    ],
)
def test_match_types(merchant, pattern, match_type, expected):
    """Test each match type, case-insensitively."""
    assert match_pattern(merchant, pattern, match_type) is expected


def test_invalid_regex_never_matches(temp_db, engine):
    """Test a malformed regex is a non-match, not an error."""
    temp_db.create_rule(1, "([unclosed", MatchType.REGEX, priority=200)
    temp_db.create_rule(2, "UBER", MatchType.CONTAINS, priority=100)

    assert match_pattern("([unclosed", "([unclosed", MatchType.REGEX) is False
    assert engine.categorize("UBER ([unclosed") == 2


TRIPLES = [
    (merchant, pattern, match_type)
    for merchant in ["ZOMATO BANGALORE", "zomato", "Uber India", "", "CAFE RESTAURANT"]
    for pattern in ["ZOMATO", "uber", "^uber", "RANT", "(bad", ""]
    for match_type in MatchType
]


@pytest.mark.parametrize("merchant,pattern,match_type", TRIPLES)
def test_matches_and_test_rule_agree(merchant, pattern, match_type):
    """Test stored-rule matching and rule testing share one implementation."""
    rule = Rule(id=1, category_id=1, pattern=pattern, match_type=match_type)

    assert CategorizationEngine.matches(merchant, rule) == CategorizationEngine.test_rule(
        merchant, pattern, match_type
    )


def test_order_rules():
    """Test evaluation order: active only, priority desc, id asc."""
    rules = [
        Rule(id=3, category_id=1, pattern="C", match_type=MatchType.CONTAINS, priority=90),
        Rule(id=2, category_id=1, pattern="B", match_type=MatchType.CONTAINS, priority=100),
        Rule(id=1, category_id=1, pattern="A", match_type=MatchType.CONTAINS, priority=100),
        Rule(id=4, category_id=1, pattern="D", match_type=MatchType.CONTAINS, priority=500, is_active=False),
    ]

    assert [rule.id for rule in order_rules(rules)] == [1, 2, 3]
