"""
Error handling for MINT with descriptive error messages
Three error kinds: syntax, name and runtime. Source positions are not tracked.
"""

from typing import List, Optional, Dict


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_error_info(
    kind: str,
    message: str,
    expected: Optional[str] = None,
    got: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """Create an immutable error description"""
    return {
        'kind': kind,
        'message': message,
        'expected': expected,
        'got': got,
        'suggestions': suggestions or []
    }


def format_error_info(info: Dict) -> str:
    """Format an error description as string"""
    error_msg = f"{info['kind']}: {info['message']}"

    if info['expected']:
        error_msg += f"\n  Expected: {info['expected']}"

    if info['got']:
        error_msg += f"\n  Got: {info['got']}"

    if info['suggestions']:
        error_msg += "\n  Suggestions:"
        for suggestion in info['suggestions']:
            error_msg += f"\n    - {suggestion}"

    return error_msg


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class MintError(Exception):
    """Base class for every error raised by the MINT core"""
    kind = "Error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict:
        return make_error_info(self.kind, self.message)


class MintSyntaxError(MintError):
    """Raised by the tokenizer or parser when the input is malformed"""
    kind = "Syntax Error"

    def __init__(self, message: str, expected: Optional[str] = None,
                 got: Optional[str] = None, suggestions: Optional[List[str]] = None):
        self.expected = expected
        self.got = got
        self.suggestions = suggestions or []
        super().__init__(message)

    def to_dict(self) -> Dict:
        return make_error_info(self.kind, self.message, self.expected, self.got, self.suggestions)


class MintNameError(MintError):
    """Raised when a variable or function cannot be resolved in the scope chain"""
    kind = "Name Error"


class MintRuntimeError(MintError):
    """Raised for arity mismatches, division by zero and missing values"""
    kind = "Runtime Error"


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def generate_suggestions(expected: Optional[str], got: Optional[str]) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []
    expected = expected or ""
    got = got or ""

    if got == "end of input" and "return" in expected:
        suggestions.append("Every function body must end with 'return <expr>'")

    if "'='" in expected and got.startswith("'"):
        suggestions.append("Statements inside a function are assignments like 'x = 1'")

    if "'else'" in expected:
        suggestions.append("Conditionals need all three parts: 'if c then a else b'")

    if "'then'" in expected or "'else'" in expected:
        suggestions.append("Nested conditionals inside a branch must be wrapped in parentheses")

    if "newline" in expected and got == "'return'":
        suggestions.append("Put each statement on its own line")

    if got == "'def'" and "expression" in expected:
        suggestions.append("'def' can only start a statement, not an expression")

    return suggestions


def make_syntax_error(message: str, expected: Optional[str] = None,
                      got: Optional[str] = None) -> MintSyntaxError:
    """Build a syntax error with generated suggestions attached"""
    return MintSyntaxError(
        message,
        expected=expected,
        got=got,
        suggestions=generate_suggestions(expected, got)
    )


def format_error(error: MintError, verbose: bool = False) -> str:
    """Format any MINT error; verbose adds expected/got/suggestion lines"""
    info = error.to_dict()
    if not verbose:
        return f"{info['kind']}: {info['message']}"
    return format_error_info(info)
