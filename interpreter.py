"""
MINT Interpreter - Tree-walking evaluation
Environments are immutable dictionaries chained through 'parent'; evaluation
threads the current environment through each statement of a function body
"""

import sys
from typing import Dict, List, Optional, Tuple
from pathlib import Path

from ast_nodes import (
    EXPRESSION_TYPES, AssignmentNode, BinaryOpNode, CallNode, Expression, FunctionDefNode,
    IdentifierNode, Node, NumberNode, Program, ReturnNode, TernaryNode
)
from error_handling import MintNameError, MintRuntimeError
from parsing import create_parser
from utilities import (
  make_value,
  require_int,
  is_truthy,
  apply_binary_op,
  validate_arity
)


# Host recursion limit while a program runs; one MINT call takes a handful of frames
RECURSION_LIMIT = 10000


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_environment(parent: Optional[Dict] = None,
                     variables: Optional[Dict] = None,
                     functions: Optional[Dict] = None) -> Dict:
  """Create an immutable runtime environment"""
  return {
      'parent': parent,
      'depth': parent['depth'] + 1 if parent is not None else 1,
      'variables': variables or {},
      'functions': functions or {}
  }


# ============================================================================
# ENVIRONMENT OPERATIONS (Pure Functions)
# ============================================================================

def env_define_variable(env: Dict, name: str, value: Dict) -> Dict:
  """Return new environment with name bound in the innermost scope"""
  return {
      **env,
      'variables': {**env['variables'], name: value}
  }


def env_get_variable(env: Optional[Dict], name: str) -> Optional[Dict]:
  """Look up a variable in the environment chain"""
  while env is not None:
    if name in env['variables']:
      return env['variables'][name]
    env = env['parent']
  return None


def env_define_function(env: Dict, name: str, func_def: FunctionDefNode) -> Dict:
  """Return new environment with a function registered in the innermost scope"""
  return {
      **env,
      'functions': {**env['functions'], name: func_def}
  }


def env_get_function(env: Optional[Dict], name: str) -> Optional[FunctionDefNode]:
  """Look up a function in the environment chain"""
  while env is not None:
    if name in env['functions']:
      return env['functions'][name]
    env = env['parent']
  return None


def env_create_child(env: Dict) -> Dict:
  """Create an empty scope whose parent is env"""
  return make_environment(parent=env)


def env_depth(env: Optional[Dict]) -> int:
  """Number of scopes in the chain (the global scope counts as 1)"""
  return env['depth'] if env is not None else 0


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_ast(node: Node, env: Dict, debug: bool = False) -> Tuple[Optional[Dict], Dict]:
  """
  Evaluate an AST node and return (result_value, updated_environment).
  Expressions leave the environment unchanged; assignments and nested
  definitions return the extended environment and no value.
  """
  if isinstance(node, EXPRESSION_TYPES):
    return eval_expression(node, env, debug), env

  if debug:
    print(f"DEBUG: Evaluating {type(node).__name__} (depth {env_depth(env)})")

  if isinstance(node, AssignmentNode):
    return eval_assignment(node, env, debug)
  elif isinstance(node, ReturnNode):
    return eval_return(node, env, debug)
  elif isinstance(node, FunctionDefNode):
    return eval_function_def(node, env, debug)
  raise MintRuntimeError(f"Unknown node type: {type(node).__name__}")


def eval_expression(expr: Expression, env: Dict, debug: bool = False) -> Optional[Dict]:
  """Evaluate an expression for its value only"""
  if debug:
    print(f"DEBUG: Evaluating {type(expr).__name__} (depth {env_depth(env)})")

  if isinstance(expr, NumberNode):
    return make_value(expr.value)
  elif isinstance(expr, IdentifierNode):
    return eval_identifier(expr, env)
  elif isinstance(expr, BinaryOpNode):
    return eval_binary_op(expr, env, debug)
  elif isinstance(expr, TernaryNode):
    return eval_ternary(expr, env, debug)
  elif isinstance(expr, CallNode):
    return eval_function_call(expr, env, debug)
  raise MintRuntimeError(f"Unknown node type: {type(expr).__name__}")


def eval_identifier(node: IdentifierNode, env: Dict) -> Dict:
  """Evaluate variable reference through the scope chain"""
  value = env_get_variable(env, node.name)
  if value is None:
    raise MintNameError(f"Undefined variable: {node.name}")
  return value


def eval_binary_op(node: BinaryOpNode, env: Dict, debug: bool = False) -> Dict:
  """Evaluate both operands (left first, no short-circuit) and apply the operator"""
  left = eval_expression(node.left, env, debug)
  right = eval_expression(node.right, env, debug)

  if left is None or right is None:
    raise MintRuntimeError("Invalid operands in binary operation")

  return apply_binary_op(node.op, left, right)


def eval_ternary(node: TernaryNode, env: Dict, debug: bool = False) -> Optional[Dict]:
  """Evaluate the condition, then only the selected branch"""
  condition = eval_expression(node.condition, env, debug)
  if condition is None:
    raise MintRuntimeError("Invalid condition in ternary expression")

  if is_truthy(condition):
    return eval_expression(node.then_expr, env, debug)
  return eval_expression(node.else_expr, env, debug)


def eval_function_call(node: CallNode, env: Dict, debug: bool = False) -> Optional[Dict]:
  """
  Call a user function. The call scope is a child of the caller's scope, so
  names the callee does not bind itself resolve through the call site.
  """
  func = env_get_function(env, node.callee)
  if func is None:
    raise MintNameError(f"Undefined function: {node.callee}")

  validate_arity(node.callee, list(func.params), list(node.args))

  arg_values = [eval_expression(arg, env, debug) for arg in node.args]

  call_env = env_create_child(env)
  for param, value in zip(func.params, arg_values):
    call_env = env_define_variable(call_env, param, value)

  if debug:
    shown = ", ".join(str(v['value']) if v else "?" for v in arg_values)
    print(f"DEBUG: Calling {node.callee}({shown})")

  for stmt in func.body:
    _, call_env = eval_ast(stmt, call_env, debug)
  return eval_expression(func.return_expr, call_env, debug)


def eval_assignment(node: AssignmentNode, env: Dict, debug: bool = False) -> Tuple[None, Dict]:
  """Bind a variable in the current scope"""
  value = eval_expression(node.value, env, debug)
  if value is None:
    raise MintRuntimeError("Invalid expression in assignment")
  return None, env_define_variable(env, node.variable, value)


def eval_return(node: ReturnNode, env: Dict, debug: bool = False) -> Tuple[Optional[Dict], Dict]:
  """Evaluate the returned expression"""
  return eval_expression(node.value, env, debug), env


def eval_function_def(node: FunctionDefNode, env: Dict, debug: bool = False) -> Tuple[None, Dict]:
  """Register a clone of a (nested) definition in the current scope"""
  if debug:
    print(f"DEBUG: Defining function {node.name}")
  return None, env_define_function(env, node.name, node.clone())


# ============================================================================
# INTERPRETER FACADE
# ============================================================================

class Interpreter:
  """Owns the parsed program and the global environment"""

  def __init__(self, source: str, debug: bool = False, recursion_limit: int = RECURSION_LIMIT):
    self.debug = debug
    self.recursion_limit = recursion_limit
    self.functions: Program = create_parser(debug).parse_string(source)

    # The global scope holds clones so that registrations never alias the parse tree
    self.global_env = make_environment()
    for func in self.functions:
      self.global_env = env_define_function(self.global_env, func.name, func.clone())

  @classmethod
  def from_file(cls, path: str, debug: bool = False, recursion_limit: int = RECURSION_LIMIT) -> 'Interpreter':
    """Load and parse a MINT source file"""
    return cls(Path(path).read_text(encoding='utf-8'), debug=debug, recursion_limit=recursion_limit)

  def function_names(self) -> List[str]:
    """Names registered in the global scope, in definition order"""
    return list(self.global_env['functions'])

  def get_function(self, name: str) -> Optional[FunctionDefNode]:
    return env_get_function(self.global_env, name)

  def run(self, function_name: str, args: List[int]) -> int:
    """
    Invoke a top-level function with integer arguments.
    The host recursion limit is raised to recursion_limit for the duration of
    the call and restored afterwards.
    """
    func = self.get_function(function_name)
    if func is None:
      raise MintNameError(f"Function not found: {function_name}")

    if len(func.params) != len(args):
      raise MintRuntimeError(f"Incorrect number of arguments for function: {function_name}")

    call_env = env_create_child(self.global_env)
    for param, arg in zip(func.params, args):
      call_env = env_define_variable(call_env, param, make_value(int(arg)))

    if self.debug:
      print(f"DEBUG: Running {function_name}({', '.join(str(a) for a in args)})")

    previous_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous_limit, self.recursion_limit))
    try:
      for stmt in func.body:
        _, call_env = eval_ast(stmt, call_env, self.debug)
      result = eval_expression(func.return_expr, call_env, self.debug)
    finally:
      sys.setrecursionlimit(previous_limit)

    return require_int(result, "Function did not return a value")


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_interpreter(source: str, debug: bool = False) -> Interpreter:
  """Factory function returning an interpreter for source text"""
  return Interpreter(source, debug=debug)


def create_debug_interpreter(source: str) -> Interpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(source, debug=True)
