"""
Calculator tools: expression evaluation and unit conversion.

Both are plain functions wrapped as LangChain StructuredTools. Failures
the caller can fix (bad expression, unknown unit pair) raise ToolException
so they come back as tool errors rather than internal errors.
"""

import math

from langchain_core.tools import StructuredTool, ToolException

# Allowed names in eval scope (safe math only)
_SAFE_NAMES = {
    "sqrt": math.sqrt,
    "log": math.log,
    "log10": math.log10,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "abs": abs,
    "round": round,
    "pi": math.pi,
    "e": math.e,
    "inf": math.inf,
}

_CONVERSIONS = {
    ("km", "miles"): lambda v: v * 0.621371,
    ("miles", "km"): lambda v: v * 1.60934,
    ("kg", "lb"): lambda v: v * 2.20462,
    ("lb", "kg"): lambda v: v * 0.453592,
    ("celsius", "fahrenheit"): lambda v: v * 9 / 5 + 32,
    ("fahrenheit", "celsius"): lambda v: (v - 32) * 5 / 9,
    ("m", "ft"): lambda v: v * 3.28084,
    ("ft", "m"): lambda v: v * 0.3048,
}


def calculate(expression: str) -> dict:
    if not expression.strip():
        raise ToolException("No expression provided")

    try:
        result = eval(expression, {"__builtins__": {}}, _SAFE_NAMES)
    except Exception as e:
        raise ToolException(f"Could not evaluate '{expression}': {e}") from e
    return {"expression": expression, "result": result}


def convert_units(value: float, from_unit: str, to_unit: str) -> dict:
    from_unit = from_unit.lower()
    to_unit = to_unit.lower()

    converter = _CONVERSIONS.get((from_unit, to_unit))
    if not converter:
        available = [f"{f} -> {t}" for f, t in _CONVERSIONS]
        raise ToolException(f"Unknown conversion: {from_unit} -> {to_unit}. Available: {available}")

    return {"value": value, "from": from_unit, "to": to_unit, "result": converter(value)}


def create_calculator_tools() -> list[StructuredTool]:
    return [
        StructuredTool.from_function(
            func=calculate,
            name="calculate",
            description=(
                "Evaluate a mathematical expression. "
                "Supports +, -, *, /, **, sqrt(), log(), sin(), cos(), pi, e."
            ),
        ),
        StructuredTool.from_function(
            func=convert_units,
            name="convert_units",
            description="Convert between common units (length, weight, temperature).",
        ),
    ]
