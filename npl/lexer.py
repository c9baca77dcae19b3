"""Tokenizer for the NPL language.

The token rules are written as a lark grammar and run through lark's
``basic`` lexer, which scans the source in a single pass and keeps track
of line numbers. Whitespace and both comment styles are ignored by the
grammar. A small post-pass converts lark tokens to NPL `Token` objects,
validates number literals and appends the ``EOF`` token.

Punctuation and operator tokens use their own text as token type (``'+'``,
``'=='``, ``'{'`` ...), literals use ``NUMBER`` and ``STRING`` and names use
``IDENT``. Keywords are not distinguished here; the parser recognises them
by text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .errors import LexicalError


@dataclass(frozen=True)
class Token:
    type: str
    value: str
    line: int

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, line={self.line})"


NPL_TOKENS = r"""
    start: (NUMBER | STRING | IDENT | OPERATOR | PUNCT)*

    OPERATOR: POW | INC | DEC | PLUS_ASSIGN | MINUS_ASSIGN | STAR_ASSIGN
            | SLASH_ASSIGN | MOD_ASSIGN | EQ | NE | GE | LE | AND | OR
            | PLUS | MINUS | STAR | SLASH | MOD | GT | LT | NOT | ASSIGN
    PUNCT: "(" | ")" | "{" | "}" | "[" | "]" | "," | "." | ":" | ";"

    POW: "**"
    INC: "++"
    DEC: "--"
    PLUS_ASSIGN: "+="
    MINUS_ASSIGN: "-="
    STAR_ASSIGN: "*="
    SLASH_ASSIGN: "/="
    MOD_ASSIGN: "%="
    EQ: "=="
    NE: "!="
    GE: ">="
    LE: "<="
    AND: "&&"
    OR: "||"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    MOD: "%"
    GT: ">"
    LT: "<"
    NOT: "!"
    ASSIGN: "="

    // Digits and dots are taken greedily; the value is validated afterwards
    NUMBER: /[0-9][0-9.]*/
    STRING: /"[^"]*"|'[^']*'|`[^`]*`/
    IDENT: /[A-Za-z_][A-Za-z0-9_]*/

    LINE_COMMENT: /\/\/[^\n]*/
    BLOCK_COMMENT: /\/\*[\s\S]*?(?:\*\/|\Z)/
    WS: /[ \t\r\n]+/

    %ignore WS
    %ignore LINE_COMMENT
    %ignore BLOCK_COMMENT
"""


NPL_LEXER = Lark(
    NPL_TOKENS,
    parser='lalr',
    lexer='basic',
)

NUMBER_LITERAL = re.compile(r'^[0-9]+(\.[0-9]+)?$')
QUOTES = '"\'`'


def tokenize(source: str) -> List[Token]:
    """Convert source text into a list of tokens ending with an EOF token.

    Raises LexicalError on an unterminated string, a malformed number or
    any character that does not start a token.
    """
    tokens: List[Token] = []
    try:
        for tok in NPL_LEXER.lex(source):
            if tok.type == 'NUMBER':
                if not NUMBER_LITERAL.match(tok.value):
                    raise LexicalError(f"Invalid number literal {tok.value}", tok.line)
                tokens.append(Token('NUMBER', tok.value, tok.line))
            elif tok.type == 'STRING':
                # delimiters are dropped, the contents are kept verbatim
                tokens.append(Token('STRING', tok.value[1:-1], tok.line))
            elif tok.type == 'IDENT':
                tokens.append(Token('IDENT', tok.value, tok.line))
            else:
                tokens.append(Token(tok.value, tok.value, tok.line))
    except UnexpectedCharacters as e:
        if e.char in QUOTES:
            raise LexicalError("Unterminated string", e.line) from None
        raise LexicalError(f"Invalid character {e.char!r}", e.line) from None
    tokens.append(Token('EOF', '', source.count('\n') + 1))
    return tokens
