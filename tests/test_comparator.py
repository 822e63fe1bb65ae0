from __future__ import annotations

from sqlpractice.services import column_matching, comparator
from sqlpractice.services.comparator import compare, grade_results
from sqlpractice.services.feedback import (
    COMPARISON_ERROR_FEEDBACK,
    REFERENCE_ERROR_FEEDBACK,
    SYNTAX_ERROR_FEEDBACK,
)
from sqlpractice.services.query_runner import QueryResult


def test_exact_match_is_correct(reference_dbs):
    outcome = compare(
        "SELECT customerName, city FROM customers",
        "SELECT customerName, city FROM customers",
        "ClassicModels",
    )

    assert outcome.overall_correct is True
    assert outcome.rows_match and outcome.column_count_match and outcome.column_names_match
    assert outcome.missing_columns == ()
    assert outcome.extra_columns == ()
    assert outcome.differences == ()
    assert outcome.feedback == (
        "Great job! Your query is correct. It matches the expected solution in both "
        "rows returned (5 rows) and columns selected."
    )


def test_compare_is_idempotent(reference_dbs):
    first = compare("SELECT city FROM customers", "SELECT customerName FROM customers", "ClassicModels")
    second = compare("SELECT city FROM customers", "SELECT customerName FROM customers", "ClassicModels")

    assert first == second


def test_column_order_does_not_matter(reference_dbs):
    outcome = compare(
        "SELECT city, customerName FROM Customers",
        "SELECT customerName, city FROM Customers",
        "ClassicModels",
    )

    assert outcome.column_names_match is True
    assert outcome.missing_columns == ()
    assert outcome.extra_columns == ()
    assert outcome.overall_correct is True


def test_different_aliases_for_same_expression_match(reference_dbs):
    outcome = compare(
        "SELECT quantityOrdered * priceEach AS total FROM orderdetails",
        "SELECT quantityOrdered * priceEach AS totalSales FROM orderdetails",
        "ClassicModels",
    )

    assert outcome.column_names_match is True
    assert outcome.overall_correct is True


def test_unaliased_expression_matches_aliased_solution(reference_dbs):
    outcome = compare(
        "SELECT quantityOrdered * priceEach FROM orderdetails",
        "SELECT quantityOrdered * priceEach AS totalSales FROM orderdetails",
        "ClassicModels",
    )

    assert outcome.column_names_match is True
    assert outcome.overall_correct is True


def test_aggregates_and_functions_match_their_aliased_forms(reference_dbs):
    count = compare(
        "SELECT COUNT(*) FROM customers",
        "SELECT COUNT(*) AS totalCustomers FROM customers",
        "ClassicModels",
    )
    functions = compare(
        "SELECT UPPER(customerName), LENGTH(city) * 2 FROM customers",
        "SELECT UPPER(customerName) AS name, LENGTH(city) * 2 AS cityLength FROM customers",
        "ClassicModels",
    )

    assert count.column_names_match is True
    assert functions.column_names_match is True


def test_different_operators_do_not_match(reference_dbs):
    outcome = compare(
        "SELECT quantityOrdered + priceEach FROM orderdetails",
        "SELECT quantityOrdered * priceEach FROM orderdetails",
        "ClassicModels",
    )

    assert outcome.column_names_match is False
    assert outcome.overall_correct is False
    assert outcome.missing_columns == ("quantityOrdered * priceEach",)
    assert outcome.extra_columns == ("quantityOrdered + priceEach",)
    assert "Your query has the correct number of columns, but some column names differ." in outcome.feedback


def test_missing_column_is_reported(reference_dbs):
    outcome = compare(
        "SELECT customerName FROM customers",
        "SELECT customerName, city FROM customers",
        "ClassicModels",
    )

    assert outcome.rows_match is True
    assert outcome.column_names_match is False
    assert outcome.missing_columns == ("city",)
    assert outcome.overall_correct is False
    assert outcome.feedback == (
        "Your query results differ from the expected solution. "
        "Your query correctly returns the expected number of rows (5 rows). "
        "Your query selects 1 columns, but the expected solution uses 2 columns. "
        "Make sure to include all required columns: city."
    )
    assert outcome.differences == ("Expected 2 columns but got 1", "Missing columns: city")


def test_row_count_must_be_exact(reference_dbs):
    outcome = compare(
        "SELECT customerName FROM customers WHERE customerNumber > 103",
        "SELECT customerName FROM customers",
        "ClassicModels",
    )

    assert outcome.rows_match is False
    assert outcome.column_names_match is True
    assert outcome.overall_correct is False
    assert "Your query returns 4 rows, but the expected solution returns 5 rows." in outcome.feedback
    assert "Expected 5 rows but got 4" in outcome.differences


def test_student_syntax_error_short_circuits(reference_dbs):
    outcome = compare("SELEKT * FROM customers", "SELECT * FROM customers", "ClassicModels")

    assert outcome.student_result.success is False
    assert outcome.solution_result.success is True
    assert outcome.solution_result.row_count == 5
    assert outcome.overall_correct is False
    assert outcome.feedback == SYNTAX_ERROR_FEEDBACK


def test_broken_solution_gets_its_own_feedback(reference_dbs, caplog):
    with caplog.at_level("ERROR", logger=comparator.__name__):
        outcome = compare("SELECT * FROM customers", "SELECT * FROM missing_table", "ClassicModels")

    assert outcome.student_result.success is True
    assert outcome.overall_correct is False
    assert outcome.feedback == REFERENCE_ERROR_FEEDBACK
    assert "Reference solution failed on ClassicModels" in caplog.text


def test_wildcard_queries_match_without_parsing(reference_dbs, monkeypatch):
    def fail(_sql):
        raise AssertionError("SELECT list should not be parsed")

    monkeypatch.setattr(column_matching, "extract_select_expressions", fail)
    outcome = compare("SELECT * FROM Customers", "SELECT * FROM Customers", "ClassicModels")

    assert outcome.column_names_match is True
    assert outcome.overall_correct is True


def test_unexpected_errors_become_feedback(reference_dbs, monkeypatch):
    def explode(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(comparator, "reconcile_columns", explode)
    outcome = compare("SELECT city FROM customers", "SELECT city FROM customers", "ClassicModels")

    assert outcome.overall_correct is False
    assert outcome.feedback == COMPARISON_ERROR_FEEDBACK


def test_compare_uses_requested_database(reference_dbs):
    outcome = compare(
        "SELECT Country, CompanyName FROM Customers",
        "SELECT CompanyName, Country FROM Customers",
        "Northwind",
    )
    assert outcome.overall_correct is True
    assert outcome.solution_result.row_count == 4


def test_grade_results_without_database():
    student = QueryResult(success=True, row_count=2, columns=("total",), message="ok")
    solution = QueryResult(success=True, row_count=2, columns=("totalSales",), message="ok")

    outcome = grade_results(
        student,
        solution,
        student_sql="SELECT a * b AS total FROM t",
        solution_sql="SELECT a*b AS totalSales FROM t",
    )

    assert outcome.overall_correct is True
    assert outcome.to_dict()["is_correct"] is True
    assert outcome.to_dict()["student_result"]["columns"] == ["total"]


def test_unencodable_student_query_is_graded_as_failure(reference_dbs):
    outcome = compare("SELECT '\ud800' AS x", "SELECT 1 AS x", "ClassicModels")

    assert outcome.student_result.success is False
    assert outcome.solution_result.success is True
    assert outcome.overall_correct is False
    assert outcome.feedback == SYNTAX_ERROR_FEEDBACK


def test_generated_column_labels_are_compared_by_expression():
    student = QueryResult(success=True, row_count=6, columns=("?column?",), message="ok")
    solution = QueryResult(success=True, row_count=6, columns=("?column?",), message="ok")

    different = grade_results(
        student,
        solution,
        student_sql="SELECT quantityOrdered + priceEach FROM orderdetails",
        solution_sql="SELECT quantityOrdered * priceEach FROM orderdetails",
    )
    same = grade_results(
        student,
        solution,
        student_sql="SELECT quantityOrdered*priceEach FROM orderdetails",
        solution_sql="SELECT quantityOrdered * priceEach FROM orderdetails",
    )

    assert different.column_names_match is False
    assert different.overall_correct is False
    assert different.missing_columns == ("?column?",)
    assert different.extra_columns == ("?column?",)
    assert same.overall_correct is True
