"""Clojure lexer: a state-machine scanner feeding tokens to a concurrent consumer."""

from __future__ import annotations

import io
import queue
import threading
from collections.abc import Callable, Iterator
from typing import TextIO, cast

from cljformat.tokens import (
    DISPATCH_CHARS,
    SINGLE_CHAR_TOKENS,
    TERMINAL_TYPES,
    Position,
    Token,
    TokenType,
    is_digit,
    is_symbol_char,
    is_whitespace,
)

# A state consumes zero or more runes and returns the next state, or None to stop.
StateFn = Callable[[], "StateFn | None"]

# How often a blocked hand-off re-checks for cancellation, in seconds.
_POLL_INTERVAL = 0.05

# How long close() waits for the scanner thread. A scanner blocked reading
# from a pipe or socket only notices cancellation once the read returns.
_CLOSE_TIMEOUT = 0.5

_CLOSED = object()


class _ReadFailed(Exception):
    def __init__(self, cause: Exception) -> None:
        super().__init__(str(cause))
        self.cause = cause


class _Cancelled(Exception):
    pass


class Lexer:
    """Tokenize Clojure source from a text stream.

    The scanner runs in its own thread and hands tokens to the consumer through
    a queue of depth one, so it never gets more than a token ahead. Iterating
    the lexer yields tokens up to and including the single terminal token
    (EOF or ERROR). A lexer is single-use; call ``close()`` (or use it as a
    context manager) to stop the scanner early.
    """

    def __init__(self, name: str, stream: TextIO) -> None:
        self._name = name
        self._input = stream
        self._pushback: str | None = None
        self._pos = Position(name)
        self._start = self._pos
        self._last_pos: Position | None = None
        self._last_ch = ""
        self._val: list[str] = []

        self._tokens: queue.Queue[object] = queue.Queue(maxsize=1)
        self._cancelled = threading.Event()
        self._failure: Exception | None = None
        self._done = False
        self._thread = threading.Thread(target=self._run, name=f"lex:{name}", daemon=True)
        self._thread.start()

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        if self._done:
            raise StopIteration
        item = self._tokens.get()
        if item is _CLOSED:
            self._done = True
            if self._failure is not None:
                raise self._failure
            raise StopIteration
        token = cast(Token, item)
        if token.type in TERMINAL_TYPES:
            self._done = True
        return token

    def next_token(self) -> Token:
        """Block until the scanner hands off its next token."""
        return next(self)

    def close(self) -> None:
        """Cancel the scanner and wait briefly for its thread to finish.

        If the scanner is stuck in a blocking read, close() returns anyway and
        the daemon thread exits on its own when the read completes.
        """
        self._cancelled.set()
        self._done = True
        # Free the slot in case the scanner is blocked on a full queue.
        try:
            self._tokens.get_nowait()
        except queue.Empty:
            pass
        self._thread.join(timeout=_CLOSE_TIMEOUT)

    def __enter__(self) -> Lexer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def _run(self) -> None:
        state: StateFn | None = self._lex_outer
        try:
            while state is not None:
                state = state()
        except _ReadFailed as exc:
            try:
                self._scan_error(exc.cause)
            except _Cancelled:
                return
        except _Cancelled:
            return
        except Exception as exc:
            self._failure = exc
        try:
            self._send(_CLOSED)
        except _Cancelled:
            pass

    def _send(self, item: object) -> None:
        while True:
            if self._cancelled.is_set():
                raise _Cancelled
            try:
                self._tokens.put(item, timeout=_POLL_INTERVAL)
                return
            except queue.Full:
                continue

    # ------------------------------------------------------------------
    # Rune helpers
    # ------------------------------------------------------------------

    def _next(self) -> str:
        """Consume one rune; return "" at end of input."""
        if self._pushback is not None:
            ch, self._pushback = self._pushback, None
        else:
            try:
                ch = self._input.read(1)
            except (OSError, UnicodeDecodeError) as exc:
                raise _ReadFailed(exc) from exc
            if not ch:
                return ""
        self._last_pos = self._pos
        self._last_ch = ch
        self._pos = self._pos.advance(ch)
        self._val.append(ch)
        return ch

    def _back(self) -> None:
        """Push back the rune returned by the most recent ``_next``."""
        if self._last_pos is None:
            raise RuntimeError("_back() call not preceded by a _next()")
        self._pushback = self._last_ch
        self._pos = self._last_pos
        self._val.pop()
        self._last_pos = None

    def _scan_while(self, pred: Callable[[str], bool]) -> None:
        """Consume runes while pred holds, leaving the first failing rune unread."""
        while True:
            ch = self._next()
            if not ch:
                return
            if not pred(ch):
                self._back()
                return

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def _emit(self, tt: TokenType, value: str | None = None) -> None:
        raw = "".join(self._val)
        if value is None:
            value = raw if tt in _RAW_VALUE_TYPES else ""
        self._send(Token(tt, value, raw, self._start))
        self._skip()

    def _skip(self) -> None:
        self._start = self._pos
        self._val.clear()

    def _errorf(self, message: str) -> None:
        self._send(Token(TokenType.ERROR, message, "".join(self._val), self._start))
        return None

    def _scan_error(self, err: Exception) -> None:
        return self._errorf(f"error while scanning: {err}")

    def _eof(self) -> None:
        self._emit(TokenType.EOF)
        return None

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _lex_outer(self) -> StateFn | None:
        ch = self._next()
        if not ch:
            return self._eof()

        if ch == ";":
            return self._lex_comment
        if ch == '"':
            return self._lex_string
        if ch == "\\":
            return self._lex_char_literal
        if ch == ":":
            return self._lex_keyword
        if ch == "%":
            return self._lex_lambda_arg
        if ch == "#":
            return self._lex_dispatch
        if ch in "+-":
            following = self._next()
            if not following:
                self._emit(TokenType.SYMBOL)
                return self._eof()
            self._back()
            if is_digit(following):
                return self._lex_number
            return self._lex_symbol

        tt = SINGLE_CHAR_TOKENS.get(ch)
        if tt is not None:
            self._emit(tt)
            return self._lex_outer

        if is_whitespace(ch):
            return self._lex_whitespace
        if is_digit(ch):
            return self._lex_number
        if is_symbol_char(ch):
            return self._lex_symbol
        return self._errorf(f"unrecognized token starting with {ch}")

    def _lex_whitespace(self) -> StateFn:
        self._scan_while(is_whitespace)
        self._skip()
        return self._lex_outer

    def _lex_comment(self) -> StateFn:
        self._scan_while(lambda ch: ch != "\n")
        self._emit(TokenType.COMMENT)
        return self._lex_outer

    def _lex_string(self) -> StateFn | None:
        escaped = False
        while True:
            ch = self._next()
            if not ch:
                return self._errorf("reached EOF before string closing quote")
            if ch == '"':
                if not escaped:
                    raw = "".join(self._val)
                    self._emit(TokenType.STRING, raw[1:-1])
                    return self._lex_outer
                escaped = False
            elif ch == "\\":
                escaped = not escaped
            else:
                escaped = False

    def _lex_char_literal(self) -> StateFn | None:
        # The rune after the backslash is always part of the literal, even a
        # delimiter: \( is the character (.
        if not self._next():
            return self._errorf("invalid character literal")
        self._scan_while(is_symbol_char)
        self._emit(TokenType.CHAR_LITERAL)
        return self._lex_outer

    def _lex_keyword(self) -> StateFn:
        self._scan_while(is_symbol_char)
        self._emit(TokenType.KEYWORD)
        return self._lex_outer

    def _lex_lambda_arg(self) -> StateFn:
        self._scan_while(is_symbol_char)
        self._emit(TokenType.LAMBDA_ARG)
        return self._lex_outer

    def _lex_dispatch(self) -> StateFn | None:
        # Whitespace matters here: '#_foo' is the discard macro applied to foo,
        # while '# _foo' and '#foo' are the tags '_foo' and 'foo'. A tag is an
        # octothorpe followed by an ordinary symbol. Opening delimiters are
        # pushed back and repeated as their own token, so "#{1}" lexes as
        # "#{", "{", "1", "}".
        ch = self._next()
        if not ch:
            self._emit(TokenType.OCTOTHORPE)
            return self._eof()
        if ch == "_":
            self._emit(TokenType.DISPATCH)
            return self._lex_outer
        self._back()
        if ch in DISPATCH_CHARS:
            self._emit(TokenType.DISPATCH, "#" + ch)
        else:
            self._emit(TokenType.OCTOTHORPE)
        return self._lex_outer

    def _lex_number(self) -> StateFn:
        # Numbers are scanned over the full symbol alphabet to match the
        # Clojure reader: '(+ 3foo)' holds the invalid number '3foo', not
        # the number 3 followed by the symbol foo.
        self._scan_while(is_symbol_char)
        self._emit(TokenType.NUMBER)
        return self._lex_outer

    def _lex_symbol(self) -> StateFn:
        self._scan_while(is_symbol_char)
        self._emit(TokenType.SYMBOL)
        return self._lex_outer


# Token types whose value is their raw text.
_RAW_VALUE_TYPES = frozenset(
    {
        TokenType.CHAR_LITERAL,
        TokenType.COMMENT,
        TokenType.DISPATCH,
        TokenType.KEYWORD,
        TokenType.LAMBDA_ARG,
        TokenType.NUMBER,
        TokenType.SYMBOL,
    }
)


def lex(source: str, name: str = "<input>") -> Lexer:
    """Start a lexer over an in-memory string."""
    return Lexer(name, io.StringIO(source))


def tokenize(source: str, name: str = "<input>") -> list[Token]:
    """Convenience function: tokenize source text and return every token.

    The list always ends with the terminal EOF or ERROR token.
    """
    with lex(source, name) as lexer:
        return list(lexer)
