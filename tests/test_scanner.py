"""Test class Scanner."""
import pytest

from formula_engine.common.errors import FormulaSyntaxError
from formula_engine.core.scanner import Scanner


@pytest.mark.parametrize(
    "text,predicate,expected",
    [
        ("7", "is_digit", True),
        ("a", "is_digit", False),
        ("_", "is_identifier_char", True),
        ("Q", "is_identifier_char", True),
        ("w", "is_identifier_char", True),
        ("1", "is_identifier_char", False),
        ("(", "is_open_paren", True),
        (")", "is_close_paren", True),
        ("[", "is_open_bracket", True),
        ("]", "is_close_bracket", True),
        (",", "is_comma", True),
        (".", "is_dot", True),
        ("-", "is_minus", True),
        ("=", "is_equals", True),
        (" ", "is_whitespace", True),
        ("\t", "is_whitespace", False),  # only blanks are whitespace
        ("", "is_digit", False),
        ("", "is_identifier_char", False),
    ],
)
def test_character_classes(text, predicate, expected) -> None:
    """Predicates look at the character under the cursor."""
    scanner = Scanner(text)
    assert getattr(scanner, predicate)() is expected


def test_accumulate_and_take_token() -> None:
    """Accumulated characters are buffered until the token is taken."""
    scanner = Scanner("AND 1")
    scanner.accumulate(3)
    assert scanner.position == 3
    assert scanner.take_token() == "AND"
    assert scanner.token == ""


def test_accumulate_stops_at_end_of_input() -> None:
    """Accumulating past the end only consumes what is left."""
    scanner = Scanner("ab")
    scanner.accumulate(5)
    assert scanner.token == "ab"
    assert not scanner.more()
    assert scanner.current() == ""


def test_skip_does_not_buffer() -> None:
    """Skipped characters never reach the token buffer."""
    scanner = Scanner("[1")
    scanner.skip()
    scanner.accumulate()
    assert scanner.take_token() == "1"


def test_skip_whitespace() -> None:
    """Blanks are skipped up to the next meaningful character."""
    scanner = Scanner("   x")
    scanner.skip_whitespace()
    assert scanner.current() == "x"


def test_rewind() -> None:
    """Rewind returns to the start and clears the buffer."""
    scanner = Scanner("abc = 1")
    scanner.accumulate(3)
    scanner.rewind()
    assert scanner.position == 0
    assert scanner.token == ""


def test_peek() -> None:
    """Peek looks ahead without moving."""
    scanner = Scanner("==")
    assert scanner.peek() == "="
    assert scanner.peek(2) == ""
    assert scanner.position == 0


def test_error_carries_context() -> None:
    """Errors report the text parsed so far and the character found."""
    scanner = Scanner("1 + $")
    scanner.position = 4
    error = scanner.error("Expected operator.")
    assert isinstance(error, FormulaSyntaxError)
    assert str(error) == 'Expected operator. Parsed "1 + ". Got "$"'
    assert error.position == 4
    assert error.found == "$"
