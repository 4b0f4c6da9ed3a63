"""
Token kinds and spellings for the EDL scripting language.

The lexer turns source text into `Token` objects whose `type` is one of the kind
strings defined here. The parser dispatches on the same strings, so this module
is the single place where the closed set of kinds lives.

Exports:
    token_hashmap: Maps every fixed spelling (operators, punctuation, keywords)
        to its token kind. The lexer uses it for keyword lookup and for
        longest-match operator recognition.
    TOKEN_SPELLINGS: Canonical source spelling for each operator kind, used by
        the source emitter and for diagnostics.
    WORD_OPERATORS: Operator kinds spelled as words (`and`, `not`, `div`, ...).
    LITERAL_TOKENS, KEYWORD_TOKENS, FOREIGN_KEYWORDS, PREPROCESSING_TOKENS:
        Groupings used by the parser's dispatch tables.
"""

# Literals
IDENT = "IDENT"
DECLITERAL = "DECLITERAL"
BINLITERAL = "BINLITERAL"
OCTLITERAL = "OCTLITERAL"
HEXLITERAL = "HEXLITERAL"
STRINGLIT = "STRINGLIT"
CHARLIT = "CHARLIT"

# Delimiters
LBRACE = "LBRACE"
RBRACE = "RBRACE"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACK = "LBRACK"
RBRACK = "RBRACK"
SEMICOLON = "SEMICOLON"
COLON = "COLON"
COMMA = "COMMA"

# Operators
ASSIGN = "ASSIGN"
ASSOP = "ASSOP"
DOT = "DOT"
ARROW = "ARROW"
DOT_STAR = "DOT_STAR"
ARROW_STAR = "ARROW_STAR"
PLUS = "PLUS"
MINUS = "MINUS"
STAR = "STAR"
SLASH = "SLASH"
PERCENT = "PERCENT"
DIV = "DIV"
MOD = "MOD"
AMPERSAND = "AMPERSAND"
PIPE = "PIPE"
CARET = "CARET"
AND = "AND"
OR = "OR"
XOR = "XOR"
BANG = "BANG"
NOT = "NOT"
TILDE = "TILDE"
EQUALS = "EQUALS"
NOTEQUAL = "NOTEQUAL"
LESS = "LESS"
GREATER = "GREATER"
LESSEQUAL = "LESSEQUAL"
GREATEREQUAL = "GREATEREQUAL"
THREEWAY = "THREEWAY"
LSH = "LSH"
RSH = "RSH"
QMARK = "QMARK"
INCREMENT = "INCREMENT"
DECREMENT = "DECREMENT"
SCOPEACCESS = "SCOPEACCESS"

# Keywords
TYPE_NAME = "TYPE_NAME"
LOCAL = "LOCAL"
GLOBAL = "GLOBAL"
RETURN = "RETURN"
EXIT = "EXIT"
BREAK = "BREAK"
CONTINUE = "CONTINUE"
SWITCH = "SWITCH"
CASE = "CASE"
DEFAULT = "DEFAULT"
FOR = "FOR"
DO = "DO"
WHILE = "WHILE"
UNTIL = "UNTIL"
REPEAT = "REPEAT"
IF = "IF"
THEN = "THEN"
ELSE = "ELSE"
WITH = "WITH"

# C++ keywords the language reserves but does not support
TRY = "TRY"
CATCH = "CATCH"
NEW = "NEW"
DELETE = "DELETE"
CLASS = "CLASS"
STRUCT = "STRUCT"

# Preprocessing leftovers; macro expansion should have removed these
M_WHITESPACE = "M_WHITESPACE"
M_CONCAT = "M_CONCAT"
M_STRINGIFY = "M_STRINGIFY"

ERROR = "ERROR"
EOF = "EOF"


token_hashmap: dict[str, str] = {
    # punctuation
    "{": LBRACE,
    "}": RBRACE,
    "(": LPAREN,
    ")": RPAREN,
    "[": LBRACK,
    "]": RBRACK,
    ";": SEMICOLON,
    ":": COLON,
    ",": COMMA,
    "begin": LBRACE,
    "end": RBRACE,
    # assignment
    "=": ASSIGN,
    "+=": ASSOP,
    "-=": ASSOP,
    "*=": ASSOP,
    "/=": ASSOP,
    "%=": ASSOP,
    "&=": ASSOP,
    "|=": ASSOP,
    "^=": ASSOP,
    "<<=": ASSOP,
    ">>=": ASSOP,
    # member access
    ".": DOT,
    "->": ARROW,
    ".*": DOT_STAR,
    "->*": ARROW_STAR,
    "::": SCOPEACCESS,
    # arithmetic
    "+": PLUS,
    "-": MINUS,
    "*": STAR,
    "/": SLASH,
    "%": PERCENT,
    "div": DIV,
    "mod": MOD,
    "++": INCREMENT,
    "--": DECREMENT,
    # bitwise
    "&": AMPERSAND,
    "|": PIPE,
    "^": CARET,
    "~": TILDE,
    "<<": LSH,
    ">>": RSH,
    # logical
    "&&": AND,
    "and": AND,
    "||": OR,
    "or": OR,
    "^^": XOR,
    "xor": XOR,
    "!": BANG,
    "not": NOT,
    # comparison
    "==": EQUALS,
    "!=": NOTEQUAL,
    "<>": NOTEQUAL,
    "<": LESS,
    ">": GREATER,
    "<=": LESSEQUAL,
    ">=": GREATEREQUAL,
    "<=>": THREEWAY,
    "?": QMARK,
    # preprocessing leftovers
    "#": M_STRINGIFY,
    "##": M_CONCAT,
    # keywords
    "var": TYPE_NAME,
    "variant": TYPE_NAME,
    "int": TYPE_NAME,
    "unsigned": TYPE_NAME,
    "char": TYPE_NAME,
    "bool": TYPE_NAME,
    "float": TYPE_NAME,
    "double": TYPE_NAME,
    "real": TYPE_NAME,
    "string": TYPE_NAME,
    "local": LOCAL,
    "global": GLOBAL,
    "globalvar": GLOBAL,
    "return": RETURN,
    "exit": EXIT,
    "break": BREAK,
    "continue": CONTINUE,
    "switch": SWITCH,
    "case": CASE,
    "default": DEFAULT,
    "for": FOR,
    "do": DO,
    "while": WHILE,
    "until": UNTIL,
    "repeat": REPEAT,
    "if": IF,
    "then": THEN,
    "else": ELSE,
    "with": WITH,
    "try": TRY,
    "catch": CATCH,
    "new": NEW,
    "delete": DELETE,
    "class": CLASS,
    "struct": STRUCT,
}

# Canonical spelling per operator kind. Kinds with several spellings
# (`and`/`&&`, `<>`/`!=`) print as the symbolic form.
TOKEN_SPELLINGS: dict[str, str] = {
    ASSIGN: "=",
    DOT: ".",
    ARROW: "->",
    DOT_STAR: ".*",
    ARROW_STAR: "->*",
    SCOPEACCESS: "::",
    PLUS: "+",
    MINUS: "-",
    STAR: "*",
    SLASH: "/",
    PERCENT: "%",
    DIV: "div",
    MOD: "mod",
    INCREMENT: "++",
    DECREMENT: "--",
    AMPERSAND: "&",
    PIPE: "|",
    CARET: "^",
    TILDE: "~",
    LSH: "<<",
    RSH: ">>",
    AND: "&&",
    OR: "||",
    XOR: "^^",
    BANG: "!",
    NOT: "not",
    EQUALS: "==",
    NOTEQUAL: "!=",
    LESS: "<",
    GREATER: ">",
    LESSEQUAL: "<=",
    GREATEREQUAL: ">=",
    THREEWAY: "<=>",
    COMMA: ",",
    QMARK: "?",
    COLON: ":",
}

WORD_OPERATORS: frozenset[str] = frozenset({DIV, MOD, NOT})

LITERAL_TOKENS: frozenset[str] = frozenset(
    {IDENT, DECLITERAL, BINLITERAL, OCTLITERAL, HEXLITERAL, STRINGLIT, CHARLIT}
)

STATEMENT_KEYWORDS: frozenset[str] = frozenset(
    {
        RETURN,
        EXIT,
        BREAK,
        CONTINUE,
        SWITCH,
        CASE,
        DEFAULT,
        FOR,
        DO,
        WHILE,
        UNTIL,
        REPEAT,
        IF,
        THEN,
        ELSE,
        WITH,
    }
)

DECLARATION_TOKENS: frozenset[str] = frozenset({TYPE_NAME, LOCAL, GLOBAL})

FOREIGN_KEYWORDS: frozenset[str] = frozenset({TRY, CATCH, NEW, DELETE, CLASS, STRUCT})

PREPROCESSING_TOKENS: frozenset[str] = frozenset({M_WHITESPACE, M_CONCAT, M_STRINGIFY})

KEYWORD_TOKENS: frozenset[str] = (
    STATEMENT_KEYWORDS | DECLARATION_TOKENS | FOREIGN_KEYWORDS
)
