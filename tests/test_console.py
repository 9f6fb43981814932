"""Tests for the command-line entry point."""

import io
import sqlite3
from pathlib import Path

import pytest

from dbconsole.console import main, run_console
from dbconsole.database import PostgresDatabase, SQLiteDatabase
from dbconsole.parsing import parse_catalog
from dbconsole.prompter import StreamReader

CATALOG = """
command 1 "Add room" mutation {
    hotelID: integer "Enter hotel ID",
    roomNo: integer "Enter room number",
    roomType: text "Enter room type",
} as "INSERT INTO Room (hotelID, roomNo, roomType) VALUES (:hotelID, :roomNo, :roomType)"

command 2 "Rooms of a hotel" query {
    hotelID: integer "Enter hotel ID",
} as "SELECT roomNo, roomType FROM Room WHERE hotelID = :hotelID ORDER BY roomNo"
  summary "Number of rooms for hotel {hotelID} is {count}"

exit 3 "< EXIT"
"""


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """A SQLite file with an empty Room table."""
    path = tmp_path / "hotel.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE Room (hotelID INTEGER, roomNo INTEGER, roomType TEXT)")
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def catalog_path(tmp_path: Path) -> Path:
    path = tmp_path / "rooms.catalog"
    path.write_text(CATALOG)
    return path


class TestMain:
    """Tests for main() with scripted input."""

    def test_script_session(self, db_path, catalog_path, tmp_path, capsys):
        """Test adding and listing rooms from a script file."""
        script = tmp_path / "session.txt"
        script.write_text("1\n3\n101\nSuite\nnope\n2\n3\n3\n")

        code = main([str(db_path), "--driver", "sqlite", "--catalog", str(catalog_path), "-f", str(script)])

        assert code == 0
        output = capsys.readouterr().out
        assert "Connecting to database...Done" in output
        assert "Done." in output
        assert "Your input is invalid!" in output
        assert "roomNo\troomType\n101\tSuite\n" in output
        assert "Number of rooms for hotel 3 is 1" in output
        assert output.endswith("Disconnecting from database...Done\n\nBye !\n")

    def test_script_echoes_answers(self, db_path, catalog_path, tmp_path, capsys):
        script = tmp_path / "session.txt"
        script.write_text("2\n3\n3\n")

        main([str(db_path), "--driver", "sqlite", "--catalog", str(catalog_path), "-f", str(script)])

        output = capsys.readouterr().out
        assert "Please make your choice: 2\n" in output
        assert "\tEnter hotel ID: 3\n" in output

    def test_echo_and_grid(self, db_path, catalog_path, tmp_path, capsys):
        script = tmp_path / "session.txt"
        script.write_text("2\n3\n3\n")

        main([
            str(db_path), "--driver", "sqlite", "--catalog", str(catalog_path),
            "-f", str(script), "--echo", "--style", "grid",
        ])

        output = capsys.readouterr().out
        assert ">>> SELECT roomNo, roomType FROM Room WHERE hotelID = 3 ORDER BY roomNo" in output
        assert "roomNo | roomType\n" in output

    def test_default_catalog_menu(self, db_path, tmp_path, capsys):
        """Test that the hotel menu is shown when no catalog is given."""
        script = tmp_path / "session.txt"
        script.write_text("18\n")

        code = main([str(db_path), "--driver", "sqlite", "-f", str(script)])

        assert code == 0
        output = capsys.readouterr().out
        assert "1. Add new customer\n" in output
        assert "18. < EXIT\n" in output

    def test_missing_script(self, db_path, tmp_path, capsys):
        code = main([str(db_path), "--driver", "sqlite", "-f", str(tmp_path / "nope.txt")])

        assert code == 1
        assert "File not found" in capsys.readouterr().err

    def test_missing_catalog(self, db_path, tmp_path, capsys):
        code = main([str(db_path), "--driver", "sqlite", "--catalog", str(tmp_path / "nope.catalog")])

        assert code == 1
        assert "Error reading catalog" in capsys.readouterr().err

    def test_invalid_catalog(self, db_path, tmp_path, capsys):
        bad = tmp_path / "bad.catalog"
        bad.write_text('command 1 "x" query { } as "SELECT :ghost"\nexit 2 "q"\n')

        code = main([str(db_path), "--driver", "sqlite", "--catalog", str(bad)])

        assert code == 1
        assert "Undeclared placeholders" in capsys.readouterr().err

    def test_postgres_needs_port_and_user(self, capsys):
        code = main(["hotel"])

        assert code == 1
        assert "<dbname> <port> <user>" in capsys.readouterr().err


class TestRunConsole:
    """Tests for the connect/loop/disconnect wrapper."""

    def test_releases_handle(self, db_path):
        out = io.StringIO()
        database = SQLiteDatabase(db_path)
        reader = StreamReader(io.StringIO("3\n"), out)

        assert run_console(parse_catalog(CATALOG), database, reader, out) == 0
        assert not database.is_open

    def test_releases_handle_on_unexpected_error(self, db_path):
        out = io.StringIO()
        database = SQLiteDatabase(db_path)

        class ExplodingReader:
            def read(self, prompt):
                raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            run_console(parse_catalog(CATALOG), database, ExplodingReader(), out)
        assert not database.is_open
        assert out.getvalue().endswith("Disconnecting from database...")

    def test_connection_failure(self, capsys):
        out = io.StringIO()
        database = PostgresDatabase("hotel", 1, "nobody", host="127.0.0.1")
        reader = StreamReader(io.StringIO(""), out)

        assert run_console(parse_catalog(CATALOG), database, reader, out) == 1
        assert "Unable to Connect to Database" in capsys.readouterr().err
