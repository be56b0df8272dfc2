"""
Recursive descent parser for answer expressions.

Grammar (lowest to highest precedence)::

    expression := term (('+' | '-') term)*
    term       := unary (('*' | '/') unary | implicit)*
    implicit   := power              # adjacency: 2x, 3(x+1), (x+1)(x-1), x(x+2), (x+1)2
    unary      := ('+' | '-') unary | power
    power      := atom ('^' unary)?  # right associative
    atom       := NUMBER | VARIABLE | FUNCTION '(' expression ')' | '(' expression ')'

Implicit multiplication is a grammar rule rather than a text rewrite.  It only
applies between adjacent tokens listed in ``Parser.IMPLICIT_AFTER``: a number
before a letter or group, a letter before a group, and a closing parenthesis
before anything that starts a factor.  Other adjacency such as ``1.2.5``,
``x2`` or ``xx`` is a parse error.
"""

from .ast import ASTNode, BinaryOp, FunctionCall, Number, UnaryOp, Variable
from .tokenizer import Token, TokenType, Tokenizer


class ParseError(Exception):
    """Exception raised during parsing."""

    def __init__(self, message: str, token: Token):
        self.message = message
        self.token = token
        super().__init__(f"{message} at position {token.pos}: '{token.value}'")


class Parser:
    """
    Recursive descent parser for the restricted answer grammar.

    The parser builds an AST from a token stream.  It knows no identifiers
    other than single-letter variables and ``sqrt``.
    """

    # Tokens that can begin an implicitly multiplied factor
    IMPLICIT_STARTS = {
        TokenType.NUMBER,
        TokenType.VARIABLE,
        TokenType.FUNCTION,
        TokenType.LPAREN,
    }

    # Previous token type -> tokens it may be implicitly multiplied with
    IMPLICIT_AFTER = {
        TokenType.NUMBER: {TokenType.VARIABLE, TokenType.FUNCTION, TokenType.LPAREN},
        TokenType.VARIABLE: {TokenType.LPAREN},
        TokenType.RPAREN: IMPLICIT_STARTS,
    }

    def __init__(self):
        self.tokens: list[Token] = []
        self.pos = 0

    def parse(self, expression: str) -> ASTNode:
        """
        Parse an expression string to an AST.

        Args:
            expression: The answer expression

        Returns:
            Root AST node

        Raises:
            ParseError: If expression is invalid
            ValueError: If expression contains unknown characters
        """
        self.tokens = Tokenizer().tokenize(expression)
        self.pos = 0

        if self.current().type == TokenType.EOF:
            raise ParseError("Empty expression", self.current())

        ast = self.parse_expression()

        if self.current().type != TokenType.EOF:
            raise ParseError("Unexpected token", self.current())

        return ast

    def current(self) -> Token:
        """Get current token without consuming it."""
        return self.tokens[self.pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current()
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def expect(self, token_type: TokenType) -> Token:
        """
        Consume a token of the expected type.

        Raises:
            ParseError: If current token doesn't match expected type
        """
        token = self.current()
        if token.type != token_type:
            raise ParseError(
                f"Expected {token_type.name}, got {token.type.name}", token
            )
        return self.advance()

    def parse_expression(self) -> ASTNode:
        """Parse additive expressions."""
        left = self.parse_term()

        while self.current().type in (TokenType.PLUS, TokenType.MINUS):
            op_token = self.advance()
            right = self.parse_term()
            left = BinaryOp(left, op_token.value, right)

        return left

    def parse_term(self) -> ASTNode:
        """Parse explicit and implicit multiplication and division."""
        left = self.parse_unary()

        while True:
            token = self.current()

            if token.type in (TokenType.MULTIPLY, TokenType.DIVIDE):
                self.advance()
                right = self.parse_unary()
                left = BinaryOp(left, token.value, right)
            elif token.type in self.IMPLICIT_STARTS:
                # A sign never starts an implicit factor: "2-x" is subtraction
                previous = self.tokens[self.pos - 1]
                if token.type not in self.IMPLICIT_AFTER.get(previous.type, ()):
                    raise ParseError("Unexpected adjacent token", token)
                right = self.parse_power()
                left = BinaryOp(left, "*", right)
            else:
                break

        return left

    def parse_unary(self) -> ASTNode:
        """Parse leading signs."""
        token = self.current()

        if token.type in (TokenType.MINUS, TokenType.PLUS):
            op_token = self.advance()
            operand = self.parse_unary()
            return UnaryOp(op_token.value, operand)

        return self.parse_power()

    def parse_power(self) -> ASTNode:
        """Parse exponentiation (right associative, binds tighter than sign)."""
        base = self.parse_atom()

        if self.current().type == TokenType.POWER:
            self.advance()
            exponent = self.parse_unary()
            return BinaryOp(base, "^", exponent)

        return base

    def parse_atom(self) -> ASTNode:
        """Parse a number, variable, function call or parenthesized group."""
        token = self.current()

        if token.type == TokenType.NUMBER:
            self.advance()
            return Number(float(token.value))

        if token.type == TokenType.VARIABLE:
            self.advance()
            return Variable(token.value)

        if token.type == TokenType.FUNCTION:
            return self.parse_function_call()

        if token.type == TokenType.LPAREN:
            self.advance()
            if self.current().type == TokenType.RPAREN:
                raise ParseError("Empty parentheses", self.current())
            inner = self.parse_expression()
            self.expect(TokenType.RPAREN)
            return inner

        raise ParseError("Unexpected token in atom", token)

    def parse_function_call(self) -> FunctionCall:
        """Parse a single-argument function call: sqrt(expr)."""
        func_token = self.advance()

        self.expect(TokenType.LPAREN)
        arg = self.parse_expression()
        self.expect(TokenType.RPAREN)

        return FunctionCall(func_token.value, [arg])
