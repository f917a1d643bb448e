"""
Token kinds and lookup tables shared by the Monkey lexer and parser.

Operator and delimiter kinds use their own literal as the kind string, so error
messages such as ``expect ), get x instead`` read naturally. Identifiers, integers
and keywords use lower-case names (``ident``, ``int``, ``let``, ...), while the
ILLEGAL and EOF sentinels stay upper-case.

Exports:
    - Token kind constants (``ILLEGAL``, ``EOF``, ``IDENT``, ``INT``, ``ASSIGN``, ...)
    - token_hashmap: literal -> kind for every operator and delimiter
    - keywords: reserved word -> kind
"""

ILLEGAL = "ILLEGAL"
EOF = "EOF"

# Identifiers and literals
IDENT = "ident"
INT = "int"

# Operators
ASSIGN = "="
PLUS = "+"
MINUS = "-"
BANG = "!"
ASTERISK = "*"
SLASH = "/"
LT = "<"
GT = ">"
EQ = "=="
NOT_EQ = "!="

# Delimiters
COMMA = ","
SEMICOLON = ";"
LPAREN = "("
RPAREN = ")"
LBRACE = "{"
RBRACE = "}"

# Keywords
FUNCTION = "function"
LET = "let"
TRUE = "true"
FALSE = "false"
IF = "if"
ELSE = "else"
RETURN = "return"

token_hashmap: dict[str, str] = {
    literal: literal
    for literal in (
        ASSIGN,
        PLUS,
        MINUS,
        BANG,
        ASTERISK,
        SLASH,
        LT,
        GT,
        EQ,
        NOT_EQ,
        COMMA,
        SEMICOLON,
        LPAREN,
        RPAREN,
        LBRACE,
        RBRACE,
    )
}

keywords: dict[str, str] = {
    "fn": FUNCTION,
    "let": LET,
    "true": TRUE,
    "false": FALSE,
    "if": IF,
    "else": ELSE,
    "return": RETURN,
}

__all__ = [
    "ILLEGAL",
    "EOF",
    "IDENT",
    "INT",
    "ASSIGN",
    "PLUS",
    "MINUS",
    "BANG",
    "ASTERISK",
    "SLASH",
    "LT",
    "GT",
    "EQ",
    "NOT_EQ",
    "COMMA",
    "SEMICOLON",
    "LPAREN",
    "RPAREN",
    "LBRACE",
    "RBRACE",
    "FUNCTION",
    "LET",
    "TRUE",
    "FALSE",
    "IF",
    "ELSE",
    "RETURN",
    "token_hashmap",
    "keywords",
]
