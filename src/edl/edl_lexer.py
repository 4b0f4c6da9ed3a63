"""
Lexical analyzer for the EDL scripting language.

This module provides the token-stream side of the parser's contract:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a stream of tokens, one `next()` at a time.
    ListTokenStream: Serves an already-built list of tokens through the same interface.

Features:
    - Skips whitespace, `//` line comments and `/* */` block comments
    - Longest-match recognition of operators and punctuation
    - Recognizes:
        * Identifiers and keywords (`if`, `repeat`, `begin`, `div`, ...)
        * Decimal, hexadecimal (`0x1F`, `$1F`), binary (`0b101`) and octal (`017`) numbers
        * Double-quoted strings and single-quoted character literals
        * Leftover preprocessing markers `#` and `##`

The lexer never raises on malformed input. Unknown characters, unterminated
strings and unterminated block comments come back as `ERROR` tokens so the
parser can report them and keep going. Once the input is exhausted every call
returns an `EOF` token.

Example:
    >>> lexer = Lexer(CharacterStream("x = 42"))
    >>> lexer.next()
    Token(IDENT, x)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - ListTokenStream
    - TokenStream
    - tokenize
    - token_hashmap
"""

from typing import Any, Callable, Protocol

from edl import edl_constants as tk
from edl.edl_constants import token_hashmap


class CharacterStream:
    """
    Cursor over EDL source text that knows the line and column of the next character.

    Attributes:
        source (str): The text being read.
        position (int): Index of the next unread character.
        line (int): Line of the next unread character, starting at 1.
        column (int): Column of the next unread character, starting at 1.
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def at_end(self) -> bool:
        return self.position >= len(self.source)

    def location(self) -> tuple[int, int]:
        return self.line, self.column

    def peek(self, offset: int = 0) -> str:
        """Looks ahead by `offset` characters. Returns "" outside the source."""
        index = self.position + offset
        return self.source[index] if 0 <= index < len(self.source) else ""

    def startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.position)

    def next(self) -> str:
        """
        Consumes one character and moves the line/column counters past it.

        Raises:
            EOFError: If the stream is already at the end of the source.
        """
        if self.at_end():
            raise EOFError(
                f"read past end of EDL source (line {self.line}, column {self.column})"
            )
        char = self.source[self.position]
        self.position += 1
        if char == "\n":
            self.line, self.column = self.line + 1, 1
        else:
            self.column += 1
        return char

    def take(self, count: int) -> str:
        return "".join(self.next() for _ in range(count))

    def take_while(self, predicate: Callable[[str], bool]) -> str:
        """Consumes characters for as long as `predicate` accepts them."""
        start = self.position
        while not self.at_end() and predicate(self.peek()):
            self.next()
        return self.source[start : self.position]


class Token:
    """One lexeme of EDL source.

    Tokens are values: the parser reads them but never changes them.

    Attributes:
        type (str): The token kind from `edl_constants` (e.g. 'IDENT', 'DECLITERAL', 'EOF').
        value (str): The raw lexeme, quotes included for string literals.
        line (int): Line of the first character, starting at 1.
        col (int): Column of the first character, starting at 1.
    """

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def _key(self) -> tuple[str, str, int, int]:
        return self.type, self.value, self.line, self.col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __str__(self) -> str:
        """Describes the token the way diagnostics quote it."""
        if self.type == tk.EOF:
            return "end of code"
        return f"`{self.value}`"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Token) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class TokenStream(Protocol):  # pragma: no cover
    """Pull-based source of tokens consumed by the parser.

    Implementations must keep returning an `EOF` token once the input is exhausted.
    """

    def next(self) -> Token: ...  # pragma: no cover


def is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class Lexer:
    """Lexical analyzer for EDL source text.

    Attributes:
        stream (CharacterStream): The source being tokenized.
    """

    WHITESPACE = " \t\r\n\f\v"
    LONGEST_OPERATOR = 3

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def skip_trivia(self) -> Token | None:
        """Skips whitespace and comments.

        Returns:
            Token | None: An `ERROR` token if a block comment runs off the end of
            the source, otherwise None.
        """
        stream = self.stream
        while not stream.at_end():
            if stream.peek() in self.WHITESPACE:
                stream.take_while(lambda c: c in self.WHITESPACE)
            elif stream.startswith("//"):
                stream.take_while(lambda c: c != "\n")
            elif stream.startswith("/*"):
                line, col = stream.location()
                end = stream.source.find("*/", stream.position + 2)
                if end < 0:
                    stream.take(len(stream.source) - stream.position)
                    return Token(tk.ERROR, "/*", line, col)
                stream.take(end + 2 - stream.position)
            else:
                break
        return None

    def match_operator(self, line: int, col: int) -> Token | None:
        """Consumes the longest operator or punctuator at the cursor, if any."""
        best = ""
        for size in range(1, self.LONGEST_OPERATOR + 1):
            candidate = self.stream.source[self.stream.position : self.stream.position + size]
            if len(candidate) == size and candidate in token_hashmap:
                best = candidate
        if not best:
            return None
        self.stream.take(len(best))
        return Token(token_hashmap[best], best, line, col)

    def read_number(self, line: int, col: int) -> Token:
        """Reads a numeric literal starting at a digit, `.` or `$`."""
        stream = self.stream
        prefix = stream.peek() + stream.peek(1).lower()

        if prefix[0] == "$" or prefix == "0x":
            text = stream.take(1 if prefix[0] == "$" else 2)
            digits = stream.take_while(is_word_char)
            valid = digits != "" and all(c in "0123456789abcdefABCDEF" for c in digits)
            return Token(tk.HEXLITERAL if valid else tk.ERROR, text + digits, line, col)

        if prefix == "0b" and stream.peek(2) in ("0", "1"):
            text = stream.take(2)
            digits = stream.take_while(is_word_char)
            valid = all(c in "01" for c in digits)
            return Token(tk.BINLITERAL if valid else tk.ERROR, text + digits, line, col)

        num = stream.take_while(str.isdigit)
        if stream.peek() == "." and stream.peek(1).isdigit():
            num += stream.take(1) + stream.take_while(str.isdigit)
            return Token(tk.DECLITERAL, num, line, col)
        if len(num) > 1 and num.startswith("0"):
            kind = tk.OCTLITERAL if all(c in "01234567" for c in num) else tk.ERROR
            return Token(kind, num, line, col)
        return Token(tk.DECLITERAL, num, line, col)

    def read_quoted(self, line: int, col: int) -> Token:
        """Reads a string or character literal, keeping its quotes in the lexeme."""
        stream = self.stream
        quote = stream.next()
        text = [quote]
        while not stream.at_end():
            ch = stream.next()
            text.append(ch)
            if ch == "\\" and not stream.at_end():
                text.append(stream.next())
            elif ch == quote:
                kind = tk.STRINGLIT if quote == '"' else tk.CHARLIT
                return Token(kind, "".join(text), line, col)
        return Token(tk.ERROR, "".join(text), line, col)

    def next(self) -> Token:
        """Consumes and returns the next Token from the stream."""
        bad_comment = self.skip_trivia()
        if bad_comment is not None:
            return bad_comment

        stream = self.stream
        line, col = stream.location()
        if stream.at_end():
            return Token(tk.EOF, "EOF", line, col)

        ch = stream.peek()
        if ch.isalpha() or ch == "_":
            word = stream.take_while(is_word_char)
            return Token(token_hashmap.get(word, tk.IDENT), word, line, col)

        nxt = stream.peek(1)
        if ch.isdigit() or (ch == "$" and nxt.isalnum()) or (ch == "." and nxt.isdigit()):
            return self.read_number(line, col)

        if ch in ('"', "'"):
            return self.read_quoted(line, col)

        token = self.match_operator(line, col)
        if token:
            return token
        return Token(tk.ERROR, stream.next(), line, col)


class ListTokenStream:
    """Serves a prepared list of tokens through the token-stream interface.

    An `EOF` token is returned once the list is used up, whether or not the list
    ended with one.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.position = 0

    def next(self) -> Token:
        if self.position < len(self.tokens):
            tok = self.tokens[self.position]
            self.position += 1
            return tok
        last = self.tokens[-1] if self.tokens else None
        if last is not None and last.type == tk.EOF:
            return last
        line, col = (last.line, last.col) if last is not None else (0, 0)
        return Token(tk.EOF, "EOF", line, col)


def tokenize(source: str) -> list[Token]:
    """Lexes `source` completely. The returned list always ends with one `EOF` token."""
    lexer = Lexer(CharacterStream(source))
    tokens = []
    while True:
        tok = lexer.next()
        tokens.append(tok)
        if tok.type == tk.EOF:
            break
    return tokens


__all__ = [
    "CharacterStream",
    "Lexer",
    "ListTokenStream",
    "Token",
    "TokenStream",
    "token_hashmap",
    "tokenize",
]
