"""
Utilities module for the MINT interpreter
Runtime value records, the binary operator table and argument checks
"""

from typing import Any, Callable, Dict, List, Optional
import operator
import re

from error_handling import MintRuntimeError


INT_TYPE = "Int"

# Decimal integer with optional sign; no whitespace or digit separators
INT_ARG_PATTERN = re.compile(r"[+-]?[0-9]+")


# ==================== VALUE UTILITIES ====================

def make_value(value: int, type_name: str = INT_TYPE) -> Dict:
  """Create an immutable runtime value"""
  return {
      'value': value,
      'type': type_name
  }


def is_value_dict(val: Any) -> bool:
  """
  Check if value is a wrapped value dict

  Args:
    val: Value to check

  Returns:
    True if val is a dict with 'type' and 'value' keys
  """
  return isinstance(val, dict) and 'type' in val and 'value' in val


def require_int(val: Optional[Dict], context: str) -> int:
  """
  Unwrap an integer runtime value

  Args:
    val: Runtime value (or None when evaluation produced nothing)
    context: Error message used when there is no usable value

  Returns:
    The Python integer held by val

  Raises:
    MintRuntimeError if val is missing or not an Int
  """
  if not is_value_dict(val) or val['type'] != INT_TYPE:
    raise MintRuntimeError(context)
  return val['value']


def is_truthy(val: Dict) -> bool:
  """Nonzero integers are true"""
  return val['value'] != 0


# ==================== ERROR MESSAGE BUILDERS ====================

def arity_error(func_name: str, expected: int, got: int) -> MintRuntimeError:
  """
  Generate arity mismatch error for a call inside a program

  Args:
    func_name: Function name
    expected: Declared number of parameters
    got: Number of arguments supplied
  """
  return MintRuntimeError(
    f"Function {func_name} called with incorrect number of arguments "
    f"(expected {expected}, got {got})"
  )


# ==================== VALIDATION UTILITIES ====================

def validate_arity(func_name: str, params: List[str], args: List[Any]) -> None:
  """Raise a MintRuntimeError if args does not match params in length"""
  if len(params) != len(args):
    raise arity_error(func_name, len(params), len(args))


def parse_int_args(raw_args: List[str]) -> List[int]:
  """
  Convert command-line strings to integers

  Raises:
    ValueError naming the first argument that is not a decimal integer
  """
  result = []
  for raw in raw_args:
    if not INT_ARG_PATTERN.fullmatch(raw):
      raise ValueError(f"Invalid argument '{raw}', expected integer")
    result.append(int(raw))
  return result


# ==================== BINARY OPERATIONS ====================

def truncating_div(left: int, right: int) -> int:
  """Integer division rounding toward zero"""
  if right == 0:
    raise MintRuntimeError("Division by zero")
  quotient = abs(left) // abs(right)
  return quotient if (left < 0) == (right < 0) else -quotient


def comparison_op(op: Callable[[int, int], bool]) -> Callable[[int, int], int]:
  """Wrap a Python comparison so that it yields 1 or 0"""
  def comparison(x: int, y: int) -> int:
    return 1 if op(x, y) else 0

  return comparison


BINARY_OPS: Dict[str, Callable[[int, int], int]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': truncating_div,
    '==': comparison_op(operator.eq),
    '!=': comparison_op(operator.ne),
    '<': comparison_op(operator.lt),
}


def apply_binary_op(op: str, left: Dict, right: Dict) -> Dict:
  """
  Apply a MINT binary operator to two runtime values

  Examples:
    apply_binary_op('+', make_value(1), make_value(2)) -> {'value': 3, 'type': 'Int'}
    apply_binary_op('<', make_value(3), make_value(2)) -> {'value': 0, 'type': 'Int'}
  """
  func = BINARY_OPS.get(op)
  if func is None:
    raise MintRuntimeError(f"Unknown binary operator: {op}")
  return make_value(func(left['value'], right['value']))
