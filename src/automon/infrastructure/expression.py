"""AST-based implementation of ExpressionEvaluator.

Rule texts are written with C-style logical operators (``&&``, ``||``, ``!``)
and lowercase ``true``/``false``. They are lexed, translated to Python
syntax and parsed with ``ast``; only arithmetic, comparison and logical
nodes plus a handful of numeric functions are accepted.
"""

import ast
import keyword
import re
from collections.abc import Iterable, Mapping
from functools import lru_cache
from types import CodeType

from loguru import logger

from src.automon.domain.exceptions import ExpressionRuntimeError, UnevaluableExpressionError
from src.automon.domain.protocols import ExpressionEvaluator

FUNCTIONS = {"abs": abs, "min": min, "max": max}

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    | (?P<number>(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?)
    | (?P<name>[A-Za-z_]\w*)
    | (?P<op>&&|\|\||==|!=|<=|>=|[-+*/%(),<>!])
    """,
    re.VERBOSE,
)

_TRANSLATIONS = {
    "&&": "and",
    "||": "or",
    "!": "not",
    "true": "True",
    "false": "False",
}

_ALLOWED_NODES = (
    ast.Expression, ast.BoolOp, ast.BinOp, ast.UnaryOp, ast.Compare, ast.Call, ast.Name, ast.Load,
    ast.Constant, ast.And, ast.Or, ast.Not, ast.USub, ast.UAdd,
    ast.Add, ast.Sub, ast.Mult, ast.Div, ast.Mod,
    ast.Gt, ast.GtE, ast.Lt, ast.LtE, ast.Eq, ast.NotEq,
)


def translate(expression: str) -> str:
    """Translate rule syntax into an equivalent Python expression."""
    tokens = []
    pos = 0

    while pos < len(expression):
        match = _TOKEN_RE.match(expression, pos)
        if match is None:
            raise UnevaluableExpressionError(
                expression, f"unexpected character {expression[pos]!r} at position {pos}"
            )
        pos = match.end()

        if match.lastgroup == "ws":
            continue

        token = match.group()
        tokens.append(_TRANSLATIONS.get(token, token))

    return " ".join(tokens)


@lru_cache(maxsize=256)
def compile_expression(expression: str) -> tuple[CodeType, frozenset[str]]:
    """
    Compile rule text once.

    Returns:
        Tuple of (code object, free variable names)
    """
    source = translate(expression)
    if not source:
        raise UnevaluableExpressionError(expression, "expression is empty")

    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as e:
        raise UnevaluableExpressionError(expression, f"syntax error: {e.msg}") from e

    call_targets = {id(node.func) for node in ast.walk(tree) if isinstance(node, ast.Call)}
    names = set()

    for node in ast.walk(tree):
        if not isinstance(node, _ALLOWED_NODES):
            raise UnevaluableExpressionError(expression, f"unsupported syntax: {type(node).__name__}")

        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name) or node.func.id not in FUNCTIONS:
                raise UnevaluableExpressionError(expression, "only abs(), min() and max() may be called")
            if node.keywords:
                raise UnevaluableExpressionError(expression, "keyword arguments are not supported")
        elif isinstance(node, ast.Name):
            if id(node) in call_targets:
                continue
            if node.id in FUNCTIONS:
                raise UnevaluableExpressionError(expression, f"function '{node.id}' used as a value")
            names.add(node.id)
        elif isinstance(node, ast.Constant) and not isinstance(node.value, (bool, int, float)):
            raise UnevaluableExpressionError(expression, f"unsupported literal {node.value!r}")

    return compile(tree, "<rule>", "eval"), frozenset(names)


class PythonExpressionEvaluator(ExpressionEvaluator):
    """Evaluates rule texts with Python's own parser under a node whitelist."""

    # Words the parser owns; never sensor identifiers whatever the prefix
    reserved_names = (
        frozenset(FUNCTIONS)
        | frozenset(keyword.kwlist)
        | frozenset(word for word in _TRANSLATIONS if word.isidentifier())
    )

    def check(self, expression: str, identifiers: Iterable[str]) -> None:
        _, names = compile_expression(expression)

        unknown = sorted(names - set(identifiers))
        if unknown:
            raise UnevaluableExpressionError(expression, f"unknown identifiers: {', '.join(unknown)}")

    def can_evaluate(self, expression: str, identifiers: Iterable[str]) -> bool:
        try:
            self.check(expression, identifiers)
        except UnevaluableExpressionError as e:
            logger.debug(f"Expression rejected: {e.details['reason']}")
            return False
        return True

    def evaluate(self, expression: str, bindings: Mapping[str, float]) -> bool:
        try:
            code, _ = compile_expression(expression)
            namespace = dict(FUNCTIONS)
            namespace.update(bindings)
            return bool(eval(code, {"__builtins__": {}}, namespace))
        except Exception as e:
            raise ExpressionRuntimeError(expression, e) from e
