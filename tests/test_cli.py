"""Tests for CLI commands."""

import pytest
from datetime import datetime

from spendtrack.cli.main import cli


@pytest.fixture
def run(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def _run(*args, input=None):
        # Drop the fixture session so later reads see what the command wrote
        temp_db.disconnect()
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], input=input)

    return _run


@pytest.fixture
def statement_file(fixtures_dir):
    return str(fixtures_dir / "hdfc_statement.txt")


def test_help_does_not_need_database(cli_runner):
    """Test the top-level help renders."""
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "statement" in result.output
    assert "sms" in result.output


def test_init_defaults(run):
    """Test seeding is idempotent."""
    result = run("init-defaults")
    assert result.exit_code == 0
    assert "Created 7 categories and 36 rules." in result.output

    result = run("init-defaults")
    assert result.exit_code == 0
    assert "Defaults already present" in result.output


def test_category_commands(run, seeded_db):
    """Test listing, creating and deleting categories."""
    result = run("category", "list")
    assert result.exit_code == 0
    assert "Food" in result.output
    assert "Others" in result.output

    result = run("category", "create", "Travel", "--color", "#123456")
    assert result.exit_code == 0
    assert "Created category 'Travel' (ID: 8)" in result.output

    result = run("category", "create", "travel")
    assert result.exit_code == 1
    assert "Error:" in result.output

    result = run("category", "delete", "Travel")
    assert result.exit_code == 0
    assert "Deleted category 'Travel'" in result.output

    result = run("category", "delete", "Food")
    assert result.exit_code == 1
    assert seeded_db.get_category_by_name("Food") is not None


def test_delete_custom_categories(run, seeded_db):
    """Test bulk deletion of custom categories."""
    run("category", "create", "Travel")
    run("category", "create", "Pets")

    result = run("category", "delete-custom", "--yes")

    assert result.exit_code == 0
    assert "Deleted 2 custom categories." in result.output
    assert len(seeded_db.list_categories()) == 7


def test_rule_add_and_list(run, seeded_db):
    """Test adding a rule and seeing it listed."""
    result = run("rule", "add", "Food", "BIRYANI", "--priority", "95")
    assert result.exit_code == 0
    assert "Added rule 37: CONTAINS 'BIRYANI' -> Food" in result.output

    result = run("rule", "list", "--category", "Food")
    assert result.exit_code == 0
    assert "BIRYANI" in result.output
    assert "UBER" not in result.output


def test_rule_add_unknown_category(run, seeded_db):
    """Test adding a rule to a missing category fails."""
    result = run("rule", "add", "Nope", "BIRYANI")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_rule_add_with_recategorize(run, seeded_db, add_transaction):
    """Test a new rule can pull in existing transactions."""
    add_transaction("BIRYANI HOUSE", category_id=7)

    result = run("rule", "add", "Food", "BIRYANI", "--recategorize")

    assert result.exit_code == 0
    assert "Recategorized 1 transaction(s)" in result.output


def test_rule_test_and_count(run, seeded_db, add_transaction):
    """Test pattern checking helpers."""
    add_transaction("ZOMATO ORDER 1")
    add_transaction("ZOMATO ORDER 2")

    result = run("rule", "test", "UPI-ZOMATO LTD", "zomato")
    assert "Match:" in result.output

    result = run("rule", "test", "UPI-ZOMATO LTD", "ZOMATO", "--match-type", "STARTS_WITH")
    assert "No match:" in result.output

    result = run("rule", "count", "ZOMATO")
    assert "2 transaction(s) match 'ZOMATO'" in result.output


def test_rule_edit_recategorizes(run, seeded_db, add_transaction):
    """Test moving a rule to another category moves its transactions."""
    txn_id = add_transaction("ZOMATO ORDER", category_id=1)

    result = run("rule", "edit", "1", "--category", "Shopping", "--recategorize")

    assert result.exit_code == 0
    assert "Recategorized 1 transaction(s)" in result.output
    assert seeded_db.get_transaction(txn_id).category_id == 3


def test_rule_edit_prompts(run, seeded_db, add_transaction):
    """Test the confirmation prompt when transactions would move."""
    txn_id = add_transaction("ZOMATO ORDER", category_id=1)

    result = run("rule", "edit", "1", "--category", "Shopping", input="n\n")

    assert result.exit_code == 0
    assert "1 transaction(s) match this rule" in result.output
    assert "Recategorized" not in result.output
    assert seeded_db.get_rule(1).category_id == 3
    assert seeded_db.get_transaction(txn_id).category_id == 1


def test_rule_edit_pattern_and_category(run, seeded_db, add_transaction):
    """Test the confirmation counts matches of the edited pattern."""
    txn_id = add_transaction("BLUE TOKAI COFFEE", category_id=7)
    run("rule", "add", "Food", "STARBUCKS2", "--no-recategorize")

    result = run("rule", "edit", "37", "--category", "Shopping", "--pattern", "BLUE TOKAI", input="y\n")

    assert result.exit_code == 0
    assert "1 transaction(s) match this rule" in result.output
    assert "Recategorized 1 transaction(s)" in result.output
    assert seeded_db.get_transaction(txn_id).category_id == 3


def test_rule_add_prompts_for_matches(run, seeded_db, add_transaction):
    """Test adding a rule offers to move transactions it already matches."""
    txn_id = add_transaction("BIRYANI HOUSE", category_id=7)

    result = run("rule", "add", "Food", "BIRYANI", input="y\n")

    assert result.exit_code == 0
    assert "1 transaction(s) match 'BIRYANI'" in result.output
    assert "Recategorized 1 transaction(s)" in result.output
    assert seeded_db.get_transaction(txn_id).category_id == 1


def test_rule_add_declines_prompt(run, seeded_db, add_transaction):
    """Test declining leaves matching transactions where they are."""
    txn_id = add_transaction("BIRYANI HOUSE", category_id=7)

    result = run("rule", "add", "Food", "BIRYANI", input="n\n")

    assert result.exit_code == 0
    assert "Recategorized" not in result.output
    assert seeded_db.get_transaction(txn_id).category_id == 7


def test_rule_edit_missing_rule(run, seeded_db):
    """Test editing an unknown rule fails."""
    result = run("rule", "edit", "999", "--priority", "1")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_rule_toggle_and_delete(run, seeded_db, add_transaction):
    """Test disabling and deleting a rule."""
    txn_id = add_transaction("ZOMATO ORDER", category_id=1)

    result = run("rule", "toggle", "1")
    assert "Rule 1 disabled" in result.output
    result = run("rule", "toggle", "1")
    assert "Rule 1 enabled" in result.output

    result = run("rule", "delete", "1")
    assert result.exit_code == 0
    assert "Deleted rule 1" in result.output
    assert "Recategorized 1 transaction(s)" in result.output
    assert seeded_db.get_transaction(txn_id).category_id == 7


def test_sms_check(run):
    """Test a dry-run parse."""
    result = run("sms", "check", "VM-HDFCBK", "INR 1,250.00 debited from A/c XX4321 to ZOMATO on 05-06-24.")

    assert result.exit_code == 0
    assert "Amount: ₹1,250.00" in result.output
    assert "Merchant: ZOMATO" in result.output
    assert "Account: XX4321" in result.output


def test_sms_ingest(run, seeded_db):
    """Test recording an SMS transaction."""
    result = run("sms", "ingest", "VM-HDFCBK", "INR 1,250.00 debited from A/c XX4321 to ZOMATO on 05-06-24.")

    assert result.exit_code == 0
    assert "New Food expense: ₹1,250.00 at ZOMATO" in result.output
    assert "Recorded transaction 1" in result.output
    assert seeded_db.get_transaction(1).category_id == 1


def test_sms_ingest_ignored(run, seeded_db):
    """Test messages that are not recorded."""
    result = run("sms", "ingest", "+919876543210", "Rs.500 debited at AMAZON.")
    assert "sender is not a known bank" in result.output

    result = run("sms", "ingest", "VM-HDFCBK", "Rs.5000.00 credited to your A/c XX1234 on 05-06-24 by NEFT")
    assert "credit transactions are not recorded" in result.output

    assert seeded_db.list_transactions() == []


def test_statement_preview(run, seeded_db, statement_file):
    """Test previewing a statement stores nothing."""
    result = run("statement", "preview", statement_file)

    assert result.exit_code == 0
    assert "4 transaction(s), 0 possible duplicate(s)" in result.output
    assert "Total withdrawals: ₹1,750.50" in result.output
    assert seeded_db.list_transactions() == []


def test_statement_import(run, seeded_db, statement_file):
    """Test importing a statement and re-importing it."""
    result = run("statement", "import", statement_file, "--yes")
    assert result.exit_code == 0
    assert "Imported: 4 transactions" in result.output

    result = run("statement", "import", statement_file, "--yes", "--skip-duplicates")
    assert result.exit_code == 0
    assert "4 possible duplicate(s)" in result.output
    assert "Imported: 0 transactions" in result.output
    assert len(seeded_db.list_transactions()) == 4


def test_statement_import_declined(run, seeded_db, statement_file):
    """Test answering no to the import prompt."""
    result = run("statement", "import", statement_file, input="n\n")

    assert result.exit_code == 1
    assert seeded_db.list_transactions() == []


def test_view_and_summary(run, seeded_db, statement_file):
    """Test viewing and summarizing imported transactions."""
    run("statement", "import", statement_file, "--yes", "--withdrawals-only")

    result = run("view", "--month", "2024-04")
    assert result.exit_code == 0
    assert "Found 3 transaction(s):" in result.output

    result = run("view", "--month", "2024-04", "--category", "Food")
    assert "Found 1 transaction(s):" in result.output

    result = run("summary", "--month", "2024-04")
    assert result.exit_code == 0
    assert "Shopping" in result.output
    assert "₹1,750.50" in result.output

    result = run("summary", "--month", "2030-01")
    assert "No expenses found." in result.output


def test_view_filters(run, seeded_db, add_transaction):
    """Test view option handling."""
    result = run("view")
    assert "No transactions found." in result.output

    result = run("view", "--category", "Nope")
    assert result.exit_code == 1

    result = run("view", "--month", "2024-04", "--today")
    assert result.exit_code == 1

    add_transaction("SWIGGY", timestamp=datetime(2024, 4, 2, 9, 0))
    result = run("view", "--start-date", "2024-04-02", "--end-date", "2024-04-02", "-v")
    assert "Merchant: SWIGGY" in result.output


def test_categorize(run, seeded_db, add_transaction):
    """Test manual categorization."""
    first = add_transaction("LOCAL SHOP", category_id=7)
    second = add_transaction("CORNER STORE", category_id=7)

    result = run("categorize", str(first), "Food")
    assert result.exit_code == 0
    assert f"Transaction {first} categorized as 'Food'" in result.output
    assert seeded_db.get_transaction(first).is_manually_edited

    result = run("categorize", str(second), "999", "Shopping")
    assert result.exit_code == 1
    assert "1 succeeded, 1 failed" in result.output
    assert seeded_db.get_transaction(second).category_id == 3


def test_transaction_commands(run, seeded_db, add_transaction):
    """Test amount correction and deletion."""
    txn_id = add_transaction("ZOMATO", amount="100.00", category_id=1)
    add_transaction("UBER", category_id=2)

    result = run("transaction", "set-amount", str(txn_id), "Rs. 1,250")
    assert result.exit_code == 0
    assert "₹1,250.00" in result.output

    result = run("transaction", "set-amount", str(txn_id), "abc")
    assert result.exit_code == 1

    result = run("transaction", "delete", str(txn_id))
    assert "Deleted transaction" in result.output

    result = run("transaction", "delete", str(txn_id))
    assert result.exit_code == 1

    result = run("transaction", "delete-all", "--yes")
    assert "Deleted 1 transactions." in result.output


def test_recategorize(run, seeded_db, add_transaction):
    """Test the bulk rerun skips manual edits."""
    add_transaction("SWIGGY DINNER", category_id=7)
    manual = add_transaction("SWIGGY LUNCH", category_id=5, is_manually_edited=True)

    result = run("recategorize")

    assert result.exit_code == 0
    assert "Recategorized 1 transaction(s)" in result.output
    assert seeded_db.get_transaction(manual).category_id == 5
