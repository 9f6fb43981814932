"""Tests for the menu loop."""

import io

import pytest

from dbconsole.database import SQLiteDatabase
from dbconsole.dispatcher import CommandDispatcher
from dbconsole.errors import DatabaseError
from dbconsole.parsing import parse_catalog
from dbconsole.prompter import StreamReader
from dbconsole.types import CommandKind, Statement

CATALOG = """
command 1 "Add customer" mutation {
    id: integer "Enter customer ID",
    fName: text "Enter first name",
    lName: text "Enter last name",
    dob: date? "Enter date of birth",
} as "INSERT INTO Customer (customerID, fName, lName, DOB) VALUES (:id, :fName, :lName, :dob)"
  summary "Customer {id} added."

command 2 "Rooms of a hotel" query {
    hotelID: integer "Enter hotel ID",
} as "SELECT hotelID, roomNo FROM Room WHERE hotelID = :hotelID ORDER BY roomNo"
  summary "Number of rooms for hotel {hotelID} is {count}"

command 3 "Customers by surname" query {
    lName: text "Enter last name",
} as "SELECT customerID, fName FROM Customer WHERE lName = :lName"

command 4 "Broken" query { } as "SELECT * FROM Nowhere"

exit 5 "< EXIT"
"""


@pytest.fixture
def db():
    """An open in-memory database with the tables the catalog uses."""
    with SQLiteDatabase(":memory:") as database:
        for sql in (
            "CREATE TABLE Customer (customerID INTEGER PRIMARY KEY, fName TEXT, lName TEXT, DOB TEXT)",
            "CREATE TABLE Room (hotelID INTEGER, roomNo INTEGER)",
            "INSERT INTO Room VALUES (3, 101), (3, 102), (4, 201)",
        ):
            database.mutate(Statement(sql, CommandKind.MUTATION))
        yield database


def _dispatcher(db, script, echo=False):
    out = io.StringIO()
    reader = StreamReader(io.StringIO(script), out)
    return CommandDispatcher(parse_catalog(CATALOG), db, reader, out=out, echo=echo), out


class TestReadChoice:
    """Tests for reading the menu number."""

    def test_reprompts_until_integer(self, db):
        dispatcher, out = _dispatcher(db, "abc\n\n 2 \n")

        assert dispatcher.read_choice() == 2
        assert out.getvalue().count("Your input is invalid!") == 2
        assert out.getvalue().count("Please make your choice: ") == 3

    def test_end_of_input(self, db):
        dispatcher, _ = _dispatcher(db, "")

        assert dispatcher.read_choice() is None


class TestDispatch:
    """Tests for running single commands."""

    def test_unrecognized_choice(self, db):
        """Test that an unknown id warns and keeps running."""
        dispatcher, out = _dispatcher(db, "")

        assert dispatcher.dispatch(99) is True
        assert out.getvalue() == "Unrecognized choice!\n"

    def test_exit_stops(self, db):
        dispatcher, out = _dispatcher(db, "")

        assert dispatcher.dispatch(5) is False
        assert out.getvalue() == ""

    def test_query_renders_and_counts(self, db):
        """Test the rooms query prints a header, rows and the summary."""
        dispatcher, out = _dispatcher(db, "3\n")

        assert dispatcher.dispatch(2) is True
        assert out.getvalue() == (
            "\tEnter hotel ID: "
            "hotelID\troomNo\n"
            "3\t101\n"
            "3\t102\n"
            "Number of rooms for hotel 3 is 2\n"
        )

    def test_mutation_with_quote(self, db):
        """Test that a surname with a quote is stored intact."""
        dispatcher, out = _dispatcher(db, "7\nSean\nO'Brien\n1990-05-01\n")

        dispatcher.dispatch(1)

        assert out.getvalue().endswith("Customer 7 added.\n")
        result = db.query(Statement("SELECT lName, DOB FROM Customer WHERE customerID = 7", CommandKind.QUERY))
        assert result.rows == (("O'Brien", "1990-05-01"),)

    def test_injection_is_inert(self, db):
        """Test that SQL in a text answer is treated as data."""
        dispatcher, out = _dispatcher(db, "x' OR '1'='1\n")

        dispatcher.dispatch(3)

        assert out.getvalue().endswith("customerID\tfName\nTotal rows: 0\n")

    def test_optional_field_stored_as_null(self, db):
        dispatcher, _ = _dispatcher(db, "8\nAda\nLee\n\n")

        dispatcher.dispatch(1)

        result = db.query(Statement("SELECT DOB FROM Customer WHERE customerID = 8", CommandKind.QUERY))
        assert result.rows == ((None,),)

    def test_echo_prints_statement(self, db):
        dispatcher, out = _dispatcher(db, "4\n", echo=True)

        dispatcher.dispatch(2)

        assert ">>> SELECT hotelID, roomNo FROM Room WHERE hotelID = 4 ORDER BY roomNo\n" in out.getvalue()

    def test_database_error_reported(self, db):
        """Test that a failing statement prints one error line."""
        dispatcher, out = _dispatcher(db, "")

        assert dispatcher.dispatch(4) is True
        assert out.getvalue() == "Error: no such table: Nowhere\n"

    def test_constraint_violation_reported(self, db):
        dispatcher, out = _dispatcher(db, "1\nA\nB\n\n1\nC\nD\n\n")

        dispatcher.dispatch(1)
        dispatcher.dispatch(1)

        assert "Error: UNIQUE constraint failed: Customer.customerID" in out.getvalue()

    def test_abort_cancels_command(self, db):
        """Test that input ending mid-command cancels only that command."""
        dispatcher, out = _dispatcher(db, "9\nAda\n")

        assert dispatcher.dispatch(1) is True
        assert out.getvalue().endswith("Command cancelled.\n")
        result = db.query(Statement("SELECT COUNT(*) FROM Customer", CommandKind.QUERY))
        assert result.rows == (("0",),)


class TestRun:
    """Tests for the whole loop."""

    def test_exit(self, db):
        dispatcher, out = _dispatcher(db, "5\n")

        assert dispatcher.run() == 0
        assert out.getvalue().count("MAIN MENU") == 1
        assert dispatcher.running is False

    def test_end_of_input_stops(self, db):
        dispatcher, out = _dispatcher(db, "2\n3\n")

        assert dispatcher.run() == 0
        assert out.getvalue().count("MAIN MENU") == 2

    def test_unrecognized_then_menu_again(self, db):
        """Test that choice 99 warns and redisplays the unchanged menu."""
        dispatcher, out = _dispatcher(db, "99\n5\n")

        dispatcher.run()

        output = out.getvalue()
        menu = "MAIN MENU\n---------\n1. Add customer\n2. Rooms of a hotel\n" \
               "3. Customers by surname\n4. Broken\n5. < EXIT\n"
        assert output == (
            menu
            + "Please make your choice: Unrecognized choice!\n"
            + menu
            + "Please make your choice: "
        )

    def test_failure_does_not_stop_loop(self, db):
        dispatcher, out = _dispatcher(db, "4\n2\n4\n5\n")

        dispatcher.run()

        output = out.getvalue()
        assert output.count("Error: no such table: Nowhere") == 1
        assert "Number of rooms for hotel 4 is 1" in output
        assert output.count("MAIN MENU") == 3

    def test_unexpected_error_propagates(self, db):
        """Test that non-command errors are not swallowed by the loop."""
        dispatcher, _ = _dispatcher(db, "2\n3\n")

        def broken_query(statement):
            raise KeyError("driver bug")

        dispatcher.database.query = broken_query
        with pytest.raises(KeyError):
            dispatcher.run()

    def test_database_error_from_fake(self, db):
        dispatcher, out = _dispatcher(db, "2\n3\n5\n")

        def failing_query(statement):
            raise DatabaseError("connection lost")

        dispatcher.database.query = failing_query
        assert dispatcher.run() == 0
        assert "Error: connection lost\n" in out.getvalue()


class TestSummaryFallback:
    """Tests for summaries that cannot be formatted."""

    FALLBACK_CATALOG = """
    command 1 "Add customer" mutation {
        id: integer "Enter customer ID",
        dob: date? "Enter date of birth",
    } as "INSERT INTO Customer (customerID, DOB) VALUES (:id, :dob)"
      summary "Born in {dob:%Y}"

    command 2 "Customers" query { dob: date? "Enter date of birth" }
      as "SELECT customerID FROM Customer WHERE DOB IS NULL OR DOB = :dob"
      summary "Born in {dob:%Y}"

    exit 3 "< EXIT"
    """

    def _dispatcher(self, db, script):
        out = io.StringIO()
        reader = StreamReader(io.StringIO(script), out)
        return CommandDispatcher(parse_catalog(self.FALLBACK_CATALOG), db, reader, out=out), out

    def test_mutation_falls_back_to_done(self, db):
        """Test that an unformattable mutation summary prints Done."""
        dispatcher, out = self._dispatcher(db, "1\n\n")

        dispatcher.dispatch(1)

        assert out.getvalue().endswith("Done.\n")
        assert "Total rows" not in out.getvalue()

    def test_query_falls_back_to_row_count(self, db):
        dispatcher, out = self._dispatcher(db, "1\n\n\n")

        dispatcher.dispatch(1)
        dispatcher.dispatch(2)

        assert out.getvalue().endswith("Total rows: 1\n")
