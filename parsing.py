"""
MINT Programming Language Parser
Tokenizer built on pyparsing scanning plus a recursive-descent parser producing the AST
"""

from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional
from dataclasses import dataclass
from pathlib import Path

from pyparsing import Literal, MatchFirst, ParserElement, Regex

from ast_nodes import (
    AssignmentNode, BinaryOpNode, CallNode, Expression, FunctionDefNode,
    IdentifierNode, NumberNode, Program, Statement, TernaryNode
)
from error_handling import MintSyntaxError, make_syntax_error


# Newline is a significant token, so it is never skipped as whitespace
WHITESPACE = " \t\r\f\v"


@dataclass(frozen=True)
class Token:
    """MINT token; value is the name for SYMBOL and the integer for CONSTANT"""
    type: str
    value: Any = None

    def __str__(self) -> str:
        if self.value is None:
            return self.type
        return f"{self.type}({self.value})"


END_OF_INPUT = Token("END_OF_INPUT")

KEYWORDS = {
    'def': "DEF",
    'return': "RETURN",
    'if': "IF",
    'then': "THEN",
    'else': "ELSE",
}

# Operators and punctuation, longest spelling first
SYMBOLS = [
    ("==", "EQ_EQ"),
    ("!=", "NOT_EQ"),
    ("=", "EQ"),
    ("(", "LPAREN"),
    (")", "RPAREN"),
    (",", "COMMA"),
    ("+", "PLUS"),
    ("-", "MINUS"),
    ("*", "MULTIPLY"),
    ("/", "DIVIDE"),
    ("<", "LESS"),
]

TOKEN_TEXT = {token_type: text for text, token_type in SYMBOLS}
TOKEN_TEXT.update({token_type: word for word, token_type in KEYWORDS.items()})

LOGICAL_OPS = {"EQ_EQ": "==", "NOT_EQ": "!=", "LESS": "<"}
ADDITIVE_OPS = {"PLUS": "+", "MINUS": "-"}
MULTIPLICATIVE_OPS = {"MULTIPLY": "*", "DIVIDE": "/"}


def describe_token(token: Token) -> str:
    """Human readable description of a token for error messages"""
    if token.type == "NEWLINE":
        return "newline"
    if token.type == "END_OF_INPUT":
        return "end of input"
    if token.type in ("SYMBOL", "CONSTANT"):
        return f"'{token.value}'"
    return f"'{TOKEN_TEXT.get(token.type, token.type)}'"


class MintTokenizer:
    """MINT tokenizer driven by a pyparsing token grammar"""

    def __init__(self):
        self._setup_token_patterns()

    def _setup_token_patterns(self):
        """Setup all token patterns for MINT"""

        def lexeme(expr: ParserElement) -> ParserElement:
            return expr.set_whitespace_chars(WHITESPACE)

        def classify_word(tokens):
            word = tokens[0]
            if word in KEYWORDS:
                return Token(KEYWORDS[word])
            return Token("SYMBOL", word)

        def marker(token_type: str) -> Callable:
            return lambda tokens: Token(token_type)

        # Comments run from '#' to end of line and produce no token
        comment = lexeme(lexeme(Regex(r"#[^\n]*")).suppress())
        newline = lexeme(Literal("\n")).set_parse_action(marker("NEWLINE"))
        number = lexeme(Regex(r"[0-9]+")).set_parse_action(
            lambda tokens: Token("CONSTANT", int(tokens[0]))
        )
        word = lexeme(Regex(r"[A-Za-z_][A-Za-z0-9_]*")).set_parse_action(classify_word)
        symbols = [
            lexeme(Literal(text)).set_parse_action(marker(token_type))
            for text, token_type in SYMBOLS
        ]

        # Anything else is a lexical error, reported when the stream reaches it
        invalid = lexeme(Regex(r".")).set_parse_action(
            lambda tokens: Token("INVALID", tokens[0])
        )

        self.token = lexeme(MatchFirst([comment, newline, number, word] + symbols + [invalid]))

    def tokenize(self, text: str) -> Iterator[Token]:
        """Lazily yield tokens of MINT source text; END_OF_INPUT is not yielded"""
        for tokens, _start, _end in self.token.scan_string(text):
            if not tokens:
                continue
            token = tokens[0]
            if token.type == "INVALID":
                if token.value == "!":
                    raise MintSyntaxError("Expected '=' after '!'", expected="'='", got="'!'")
                raise MintSyntaxError(f"Unknown character: {token.value}", got=f"'{token.value}'")
            yield token


class TokenStream:
    """Lazily advanced cursor over a token iterator"""

    def __init__(self, tokens: Iterable[Token]):
        self._tokens = iter(tokens)
        self.current = END_OF_INPUT
        self.advance()

    def advance(self) -> None:
        self.current = next(self._tokens, END_OF_INPUT)

    def at_end(self) -> bool:
        return self.current.type == "END_OF_INPUT"

    def check(self, *token_types: str) -> bool:
        return self.current.type in token_types


class Parser:
    """Recursive-descent parser for MINT programs"""

    def __init__(self, stream: TokenStream, debug: bool = False):
        self.stream = stream
        self.debug = debug

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _error(self, message: str, expected: Optional[str] = None) -> MintSyntaxError:
        return make_syntax_error(message, expected=expected, got=describe_token(self.stream.current))

    def _expect(self, token_type: str, message: str, expected: str) -> Token:
        """Consume a token of token_type or raise a syntax error"""
        token = self.stream.current
        if token.type != token_type:
            raise self._error(message, expected)
        self.stream.advance()
        return token

    def _skip_newlines(self) -> None:
        while not self.stream.at_end() and self.stream.check("NEWLINE"):
            self.stream.advance()

    # ------------------------------------------------------------------
    # program structure
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        functions = []

        while not self.stream.at_end():
            self._skip_newlines()
            if self.stream.at_end():
                break

            if self.stream.check("DEF"):
                functions.append(self.parse_function_def())
            else:
                raise self._error("Expected function definition or newline", "'def'")

        return functions

    def parse_function_def(self) -> FunctionDefNode:
        self._expect("DEF", "Expected 'def' keyword", "'def'")
        name = self._expect("SYMBOL", "Expected function name after 'def'", "function name").value
        self._expect("LPAREN", "Expected '(' after function name", "'('")

        params = []
        if not self.stream.check("RPAREN"):
            params.append(self._expect("SYMBOL", "Expected parameter name", "parameter name").value)
            while self.stream.check("COMMA"):
                self.stream.advance()
                params.append(
                    self._expect("SYMBOL", "Expected parameter name after ','", "parameter name").value
                )

        self._expect("RPAREN", "Expected ')' after parameters", "')'")
        self._expect("NEWLINE", "Expected newline after function declaration", "newline")

        body: List[Statement] = []
        return_expr = None

        while not self.stream.at_end():
            self._skip_newlines()
            if self.stream.at_end():
                break

            if self.stream.check("DEF"):
                body.append(self.parse_function_def())
                continue

            if self.stream.check("RETURN"):
                self.stream.advance()
                return_expr = self.parse_expression()
                if not self.stream.check("NEWLINE", "END_OF_INPUT"):
                    raise self._error("Expected newline after return statement", "newline")
                if not self.stream.at_end():
                    self.stream.advance()
                break

            body.append(self.parse_statement())
            self._expect("NEWLINE", "Expected newline after statement", "newline")

        if return_expr is None:
            raise self._error("Function must end with a return statement", "'return'")

        if self.debug:
            print(f"DEBUG: parsed function {name}({', '.join(params)}) with {len(body)} statements")

        return FunctionDefNode(name, tuple(params), tuple(body), return_expr)

    def parse_statement(self) -> Statement:
        if self.stream.check("SYMBOL"):
            name = self.stream.current.value
            self.stream.advance()
            self._expect("EQ", "Expected '=' after variable name", "'='")
            return AssignmentNode(name, self.parse_expression())

        raise self._error("Expected statement", "assignment, 'def' or 'return'")

    # ------------------------------------------------------------------
    # expressions, lowest precedence first
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expression:
        return self.parse_ternary()

    def parse_ternary(self) -> Expression:
        if not self.stream.check("IF"):
            return self.parse_logical()

        self.stream.advance()
        condition = self.parse_logical()
        self._expect("THEN", "Expected 'then' after condition", "'then'")
        then_expr = self.parse_logical()
        self._expect("ELSE", "Expected 'else' after then expression", "'else'")
        else_expr = self.parse_logical()
        return TernaryNode(condition, then_expr, else_expr)

    def _parse_binary_level(self, operand: Callable[[], Expression], operators: Dict[str, str]) -> Expression:
        """Left-associative chain of operand (op operand)*"""
        expr = operand()
        while self.stream.current.type in operators:
            op = operators[self.stream.current.type]
            self.stream.advance()
            expr = BinaryOpNode(op, expr, operand())
        return expr

    def parse_logical(self) -> Expression:
        return self._parse_binary_level(self.parse_additive, LOGICAL_OPS)

    def parse_additive(self) -> Expression:
        return self._parse_binary_level(self.parse_multiplicative, ADDITIVE_OPS)

    def parse_multiplicative(self) -> Expression:
        return self._parse_binary_level(self.parse_primary, MULTIPLICATIVE_OPS)

    def parse_primary(self) -> Expression:
        token = self.stream.current

        if token.type == "CONSTANT":
            self.stream.advance()
            return NumberNode(token.value)

        if token.type == "SYMBOL":
            self.stream.advance()
            if not self.stream.check("LPAREN"):
                return IdentifierNode(token.value)

            self.stream.advance()
            args = []
            if not self.stream.check("RPAREN"):
                args.append(self.parse_expression())
                while self.stream.check("COMMA"):
                    self.stream.advance()
                    args.append(self.parse_expression())
            self._expect("RPAREN", "Expected ')' after function arguments", "')'")
            return CallNode(token.value, tuple(args))

        if token.type == "LPAREN":
            self.stream.advance()
            expr = self.parse_expression()
            self._expect("RPAREN", "Expected ')' after expression", "')'")
            return expr

        raise self._error("Expected expression", "expression")


class MintParser:
    """Main MINT parser interface"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.tokenizer = MintTokenizer()

    def _parser_for(self, text: str) -> Parser:
        return Parser(TokenStream(self.tokenizer.tokenize(text)), debug=self.debug)

    def parse_file(self, filepath: str) -> Program:
        """Parse a MINT file"""
        text = Path(filepath).read_text(encoding='utf-8')
        return self.parse_string(text)

    def parse_string(self, text: str) -> Program:
        """Parse MINT source text into a list of function definitions"""
        program = self._parser_for(text).parse_program()
        if self.debug:
            print(f"DEBUG: parsed {len(program)} top-level functions")
        return program

    def parse_expression(self, text: str) -> Expression:
        """Parse a single expression (trailing newlines allowed)"""
        parser = self._parser_for(text)
        expr = parser.parse_expression()
        parser._skip_newlines()
        if not parser.stream.at_end():
            raise parser._error("Unexpected token after expression", "end of input")
        return expr

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize text for debugging; the list ends with END_OF_INPUT"""
        return list(self.tokenizer.tokenize(text)) + [END_OF_INPUT]


def create_parser(debug: bool = False) -> MintParser:
    """Create a MINT parser"""
    return MintParser(debug=debug)


def create_debug_parser() -> MintParser:
    """Create a MINT parser with debug output"""
    return MintParser(debug=True)
