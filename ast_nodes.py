"""
MINT abstract syntax tree
Immutable node types with structural equality, deep cloning and tree walking
"""

from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, List, Tuple, Union


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class NumberNode:
    """Integer literal"""
    value: int


@dataclass(frozen=True)
class IdentifierNode:
    """Variable reference"""
    name: str


@dataclass(frozen=True)
class BinaryOpNode:
    """Binary operation; op is one of + - * / == != <"""
    op: str
    left: 'Expression'
    right: 'Expression'


@dataclass(frozen=True)
class TernaryNode:
    """if condition then then_expr else else_expr"""
    condition: 'Expression'
    then_expr: 'Expression'
    else_expr: 'Expression'


@dataclass(frozen=True)
class CallNode:
    """Function call by name"""
    callee: str
    args: Tuple['Expression', ...] = ()


Expression = Union[NumberNode, IdentifierNode, BinaryOpNode, TernaryNode, CallNode]


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class AssignmentNode:
    """variable = value"""
    variable: str
    value: Expression


@dataclass(frozen=True)
class ReturnNode:
    """return value"""
    value: Expression


@dataclass(frozen=True)
class FunctionDefNode:
    """
    Function definition. Also a statement: a nested def is registered into
    the running scope when the enclosing body executes it.
    """
    name: str
    params: Tuple[str, ...]
    body: Tuple['Statement', ...]
    return_expr: Expression

    def clone(self) -> 'FunctionDefNode':
        """Return a structurally equal copy sharing no nodes with self"""
        return clone_node(self)


Statement = Union[AssignmentNode, ReturnNode, FunctionDefNode]
Node = Union[Expression, Statement]
Program = List[FunctionDefNode]

EXPRESSION_TYPES = (NumberNode, IdentifierNode, BinaryOpNode, TernaryNode, CallNode)
STATEMENT_TYPES = (AssignmentNode, ReturnNode, FunctionDefNode)


# ============================================================================
# CLONING
# ============================================================================

def clone_node(node: Node) -> Node:
    """Deep-clone an AST node, creating new instances at every level"""
    if isinstance(node, NumberNode):
        return NumberNode(node.value)
    elif isinstance(node, IdentifierNode):
        return IdentifierNode(node.name)
    elif isinstance(node, BinaryOpNode):
        return BinaryOpNode(node.op, clone_node(node.left), clone_node(node.right))
    elif isinstance(node, TernaryNode):
        return TernaryNode(
            clone_node(node.condition),
            clone_node(node.then_expr),
            clone_node(node.else_expr)
        )
    elif isinstance(node, CallNode):
        return CallNode(node.callee, tuple(clone_node(arg) for arg in node.args))
    elif isinstance(node, AssignmentNode):
        return AssignmentNode(node.variable, clone_node(node.value))
    elif isinstance(node, ReturnNode):
        return ReturnNode(clone_node(node.value))
    elif isinstance(node, FunctionDefNode):
        return FunctionDefNode(
            node.name,
            tuple(node.params),
            tuple(clone_node(stmt) for stmt in node.body),
            clone_node(node.return_expr)
        )
    raise TypeError(f"Cannot clone {type(node).__name__}")


# ============================================================================
# TREE WALKING
# ============================================================================

def node_children(node: Node) -> List[Node]:
    """Direct child nodes in source order"""
    if isinstance(node, BinaryOpNode):
        return [node.left, node.right]
    elif isinstance(node, TernaryNode):
        return [node.condition, node.then_expr, node.else_expr]
    elif isinstance(node, CallNode):
        return list(node.args)
    elif isinstance(node, (AssignmentNode, ReturnNode)):
        return [node.value]
    elif isinstance(node, FunctionDefNode):
        return list(node.body) + [node.return_expr]
    return []


def walk(node: Node, visit: Callable[[Node], None]) -> None:
    """Pre-order traversal calling visit on every node"""
    visit(node)
    for child in node_children(node):
        walk(child, visit)


def find_nodes_by_type(root: Node, node_type: type) -> List[Node]:
    """Find all nodes of a specific type in a tree"""
    results = []

    def search(node: Node):
        if isinstance(node, node_type):
            results.append(node)

    walk(root, search)
    return results


def ast_to_dict(node: Node) -> Dict[str, Any]:
    """Convert AST to a plain dictionary representation"""
    result: Dict[str, Any] = {'type': type(node).__name__}
    for field in fields(node):
        value = getattr(node, field.name)
        if isinstance(value, tuple):
            result[field.name] = [ast_to_dict(v) if not isinstance(v, str) else v for v in value]
        elif isinstance(value, EXPRESSION_TYPES + STATEMENT_TYPES):
            result[field.name] = ast_to_dict(value)
        else:
            result[field.name] = value
    return result


def format_expression(expr: Expression) -> str:
    """Render an expression back to (fully parenthesized) source form"""
    if isinstance(expr, NumberNode):
        return str(expr.value)
    elif isinstance(expr, IdentifierNode):
        return expr.name
    elif isinstance(expr, BinaryOpNode):
        return f"({format_expression(expr.left)} {expr.op} {format_expression(expr.right)})"
    elif isinstance(expr, TernaryNode):
        return (f"(if {format_expression(expr.condition)} "
                f"then {format_expression(expr.then_expr)} "
                f"else {format_expression(expr.else_expr)})")
    elif isinstance(expr, CallNode):
        return f"{expr.callee}({', '.join(format_expression(arg) for arg in expr.args)})"
    raise TypeError(f"Not an expression: {type(expr).__name__}")


def pretty_print_ast(node: Node, indent: int = 0) -> str:
    """Pretty print a function definition or statement as an indented outline"""
    prefix = "  " * indent
    if isinstance(node, FunctionDefNode):
        lines = [f"{prefix}FunctionDef {node.name}({', '.join(node.params)})"]
        for stmt in node.body:
            lines.append(pretty_print_ast(stmt, indent + 1))
        lines.append(f"{prefix}  Return {format_expression(node.return_expr)}")
        return "\n".join(lines)
    elif isinstance(node, AssignmentNode):
        return f"{prefix}Assign {node.variable} = {format_expression(node.value)}"
    elif isinstance(node, ReturnNode):
        return f"{prefix}Return {format_expression(node.value)}"
    return f"{prefix}{format_expression(node)}"
