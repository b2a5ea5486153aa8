"""Cursor over formula text with a pending-token buffer."""
import string

from formula_engine.common.errors import FormulaSyntaxError

IDENTIFIER_CHARACTERS = frozenset(string.ascii_letters + "_")
DIGITS = frozenset(string.digits)
WHITESPACE = " "


class Scanner:
    """
    Track the read position over a formula and buffer the characters of the token being lexed.

    Whitespace (a single blank) is skipped between tokens and never buffered.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.position = 0
        self.token = ""

    # Character classes

    def current(self) -> str:
        """Return the character under the cursor, or an empty string at end of input."""
        return self.text[self.position] if self.more() else ""

    def more(self) -> bool:
        return self.position < len(self.text)

    def is_digit(self) -> bool:
        return self.current() in DIGITS

    def is_identifier_char(self) -> bool:
        return self.current() in IDENTIFIER_CHARACTERS

    def is_char(self, char: str) -> bool:
        return self.more() and self.current() == char

    def is_open_paren(self) -> bool:
        return self.is_char("(")

    def is_close_paren(self) -> bool:
        return self.is_char(")")

    def is_open_bracket(self) -> bool:
        return self.is_char("[")

    def is_close_bracket(self) -> bool:
        return self.is_char("]")

    def is_comma(self) -> bool:
        return self.is_char(",")

    def is_dot(self) -> bool:
        return self.is_char(".")

    def is_minus(self) -> bool:
        return self.is_char("-")

    def is_equals(self) -> bool:
        return self.is_char("=")

    def is_whitespace(self) -> bool:
        return self.is_char(WHITESPACE)

    def peek(self, offset: int = 1) -> str:
        index = self.position + offset
        return self.text[index] if index < len(self.text) else ""

    # Mutators

    def skip(self) -> None:
        """Advance one character without buffering it."""
        self.position += 1

    def skip_whitespace(self) -> None:
        while self.is_whitespace():
            self.position += 1

    def accumulate(self, count: int = 1) -> None:
        """
        Copy the next ``count`` characters into the token buffer and advance past them.

        :param int count: Number of characters to consume
        """
        end = min(self.position + count, len(self.text))
        self.token += self.text[self.position:end]
        self.position = end

    def take_token(self) -> str:
        """Return the buffered token and clear the buffer."""
        token, self.token = self.token, ""
        return token

    def rewind(self) -> None:
        """Return to the start of the input and drop the buffer."""
        self.position = 0
        self.token = ""

    # Errors

    def error(self, message: str) -> FormulaSyntaxError:
        """
        Build a syntax error carrying the text parsed so far and the character found.

        :param str message: Failure text

        :return: Error ready to be raised
        :rtype: FormulaSyntaxError
        """
        return FormulaSyntaxError(message, self.position, self.text[:self.position], self.current())
