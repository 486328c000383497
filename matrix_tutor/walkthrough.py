"""Step-by-step walkthroughs for the four procedures.

Every public function returns a result dict with the same shape:

    equation, given, method, steps, final_answer,
    verification_steps, summary

Each step is ``{description, expression, explanation, step_number}``.  All
numbers come from the exact engine; SymPy is only used as an independent
cross-check in the verification section.
"""

import logging
import time
from datetime import datetime

import sympy

from matrix_tutor import config
from matrix_tutor.cramer import cramer_matrix
from matrix_tutor.determinant import (
    ROW, best_expansion_line, cofactor_terms, determinant,
    extend_for_sarrus, sarrus_terms,
)
from matrix_tutor.errors import DimensionMismatchError, InvalidOperandError
from matrix_tutor.hints import auto_reduce
from matrix_tutor.inverse import GaussJordanInverter, run_to_identity
from matrix_tutor.matrix import SCALE, SWAP, Matrix, as_matrix
from matrix_tutor.rational import Rational
from matrix_tutor.substitution import UNRESOLVED, back_substitute, verify_solution

LOG = logging.getLogger(__name__)


# ── Formatting helpers ──────────────────────────────────────────────────

def _num(value: Rational) -> str:
    """Display form, parenthesised when negative or fractional."""
    s = value.to_display_form()
    if value.is_negative() or not value.is_integer():
        return f"({s})"
    return s


def _approx(value: Rational, places: int) -> str:
    """``3/2 (≈ 1.5)`` for fractions, plain display form for integers."""
    if value.is_integer():
        return value.to_display_form()
    approx = f"{value.to_decimal():.{places}f}".rstrip("0").rstrip(".")
    return f"{value.to_display_form()} (≈ {approx})"


def _grid(m: Matrix, split: int = None) -> str:
    """Matrix as aligned text; a ``|`` is drawn before column *split*."""
    width = max(len(c.to_display_form()) for r in m.data for c in r)
    lines = []
    for r in m.data:
        cells = []
        for j, c in enumerate(r):
            if split is not None and j == split:
                cells.append("|")
            cells.append(c.to_display_form().rjust(width))
        lines.append("[ " + " ".join(cells) + " ]")
    return "\n".join(lines)


def _variable_names(count: int, variables=None) -> list:
    if variables is not None:
        names = list(variables)
        if len(names) < count:
            raise DimensionMismatchError(
                f"Need {count} variable names, got {len(names)}."
            )
        return names[:count]
    names = list(config.get_settings()["variable_names"])
    if count <= len(names):
        return names[:count]
    return [f"x{k + 1}" for k in range(count)]


def _number_steps(steps: list) -> None:
    for i, step in enumerate(steps, start=1):
        step["step_number"] = i


def _summary(t_start: float, steps: list, verification_steps: list,
             validation_status: str) -> dict:
    t_end = time.perf_counter()
    return {
        "runtime_ms": round((t_end - t_start) * 1000, 2),
        "total_steps": len(steps),
        "verification_steps": len(verification_steps),
        "validation_status": validation_status,
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "library": f"SymPy {sympy.__version__}",
    }


def _verify_system(a: Matrix, b: list, values: list, names: list) -> tuple:
    """Substitute *values* into every equation of ``A x = b``."""
    steps = []
    ok = True
    for i, row in enumerate(a.data):
        terms = []
        total = Rational(0)
        for coef, v in zip(row, values):
            terms.append(f"{_num(coef)}·{_num(v)}")
            total = total + coef * v
        holds = total.equals(b[i])
        ok = ok and holds
        steps.append({
            "description": f"Check equation ({i + 1})",
            "expression": f"{' + '.join(terms)} = {total.to_display_form()}",
            "explanation": (
                f"The left side evaluates to {total.to_display_form()}, "
                f"which {'matches' if holds else 'does NOT match'} the "
                f"constant {b[i].to_display_form()}."
            ),
        })
    _number_steps(steps)
    return steps, ok


def _operation_step(op, m: Matrix, split: int) -> dict:
    if op.kind == SWAP:
        explanation = (
            f"The pivot position in R{op.target + 1} holds 0, so we swap it "
            f"with R{op.source + 1}, which has a non-zero entry in that column."
        )
    elif op.kind == SCALE:
        explanation = (
            f"Multiply R{op.target + 1} by {op.factor.to_display_form()} "
            f"so that its pivot becomes 1."
        )
    else:
        explanation = (
            f"Add {op.factor.to_display_form()} × R{op.source + 1} to "
            f"R{op.target + 1} to make the entry in the pivot column 0."
        )
    return {
        "description": op.describe(),
        "expression": _grid(m, split),
        "explanation": explanation,
    }


def _singular_result(equation: str, given: dict, method: dict, steps: list,
                     t_start: float, det_a: Rational) -> dict:
    steps.append({
        "description": "Singular matrix — no unique solution",
        "expression": "det(A) = 0",
        "explanation": (
            "The determinant of the coefficient matrix is 0, so A has no "
            "inverse and the system has either no solution or infinitely many."
        ),
    })
    _number_steps(steps)
    return {
        "equation": equation,
        "given": given,
        "method": method,
        "steps": steps,
        "final_answer": "No unique solution — det(A) = 0 (singular matrix).",
        "verification_steps": [],
        "singular": True,
        "determinant": det_a.to_display_form(),
        "summary": _summary(t_start, steps, [], "fail"),
    }


# ── Determinant ─────────────────────────────────────────────────────────

# Matrix order each method applies to; None for any order.
_METHOD_ORDERS = {"single": 1, "closed-form": 2, "sarrus": 3, "cofactor": None}


def _closed_form_steps(m: Matrix, det: Rational) -> list:
    (a, b), (c, d) = m.data
    return [
        {
            "description": "Multiply the main diagonal",
            "expression": f"{_num(a)} × {_num(d)} = {(a * d).to_display_form()}",
            "explanation": "Top-left times bottom-right.",
        },
        {
            "description": "Multiply the other diagonal",
            "expression": f"{_num(b)} × {_num(c)} = {(b * c).to_display_form()}",
            "explanation": "Top-right times bottom-left.",
        },
        {
            "description": "Subtract",
            "expression": (
                f"{_num(a * d)} − {_num(b * c)} = {det.to_display_form()}"
            ),
            "explanation": "det = ad − bc.",
        },
    ]


def _sarrus_steps(m: Matrix, det: Rational) -> list:
    steps = [{
        "description": "Extend the matrix",
        "expression": _grid(extend_for_sarrus(m)),
        "explanation": "Copy the first two columns to the right of the matrix.",
    }]
    (a, b, c), (d, e, f), (g, h, i) = m.data
    terms = sarrus_terms(m)
    down_factors = [(a, e, i), (b, f, g), (c, d, h)]
    up_factors = [(c, e, g), (a, f, h), (b, d, i)]
    for k, (factors, value) in enumerate(zip(down_factors, terms["down"]), 1):
        steps.append({
            "description": f"Downward diagonal {k}",
            "expression": " × ".join(_num(x) for x in factors)
                          + f" = {value.to_display_form()}",
            "explanation": "Downward diagonals are added.",
        })
    for k, (factors, value) in enumerate(zip(up_factors, terms["up"]), 1):
        steps.append({
            "description": f"Upward diagonal {k}",
            "expression": " × ".join(_num(x) for x in factors)
                          + f" = {value.to_display_form()}",
            "explanation": "Upward diagonals are subtracted.",
        })
    down_sum = terms["down"][0] + terms["down"][1] + terms["down"][2]
    up_sum = terms["up"][0] + terms["up"][1] + terms["up"][2]
    steps.append({
        "description": "Sum of downward diagonals",
        "expression": " + ".join(_num(v) for v in terms["down"])
                      + f" = {down_sum.to_display_form()}",
        "explanation": "Add the three downward products.",
    })
    steps.append({
        "description": "Sum of upward diagonals",
        "expression": " + ".join(_num(v) for v in terms["up"])
                      + f" = {up_sum.to_display_form()}",
        "explanation": "Add the three upward products.",
    })
    steps.append({
        "description": "Subtract",
        "expression": f"{_num(down_sum)} − {_num(up_sum)} = {det.to_display_form()}",
        "explanation": "det = (downward sum) − (upward sum).",
    })
    return steps


def _cofactor_steps(m: Matrix, det: Rational, line: str, index: int) -> list:
    terms = cofactor_terms(m, line, index)
    label = f"row {index + 1}" if line == ROW else f"column {index + 1}"
    zeros = sum(1 for t in terms if t["element"].is_zero())
    steps = [{
        "description": f"Expand along {label}",
        "expression": _grid(m),
        "explanation": (
            f"{label.capitalize()} has {len(terms) - zeros} non-zero "
            f"element(s); {zeros} zero element(s) contribute nothing."
        ),
    }]
    for t in terms:
        pos = f"({t['row'] + 1}, {t['col'] + 1})"
        if t["element"].is_zero():
            steps.append({
                "description": f"Skip element {pos}",
                "expression": "0 × (minor) = 0",
                "explanation": "A zero element contributes 0 whatever its minor is.",
            })
            continue
        sign = "+" if t["sign"].is_one() else "−"
        minor_text = _grid(t["minor"]) if t["minor"] is not None else "(none)"
        steps.append({
            "description": f"Minor of element {pos}",
            "expression": (
                f"{minor_text}\ndet = {t['minor_determinant'].to_display_form()}"
            ),
            "explanation": (
                f"Delete row {t['row'] + 1} and column {t['col'] + 1}; the sign "
                f"at {pos} is (−1)^({t['row'] + 1}+{t['col'] + 1}) = {sign}."
            ),
        })
        steps.append({
            "description": f"Contribution of element {pos}",
            "expression": (
                f"{sign}{_num(t['element'])} × {_num(t['minor_determinant'])} "
                f"= {t['contribution'].to_display_form()}"
            ),
            "explanation": "sign × element × minor determinant.",
        })
    parts = [_num(t["contribution"]) for t in terms if not t["element"].is_zero()]
    steps.append({
        "description": "Add the contributions",
        "expression": (" + ".join(parts) or "0") + f" = {det.to_display_form()}",
        "explanation": "The determinant is the sum of all contributions.",
    })
    return steps


def explain_determinant(matrix, method: str = None, line: str = None,
                        index: int = None) -> dict:
    """Walk through ``det(A)``.

    *method* is ``"single"`` (1x1), ``"closed-form"`` (2x2), ``"sarrus"``
    (3x3), ``"cofactor"`` (any order) or ``None`` to pick by order.  For cofactor expansion *line*/*index* select the row or
    column; by default the line with the most zeros is used.
    """
    t_start = time.perf_counter()
    m = as_matrix(matrix)
    n = m.rows
    settings = config.get_settings()
    det = determinant(m, max_order=settings["max_order"])

    if method is None:
        if n == 1:
            method = "single"
        elif n == 2:
            method = "closed-form"
        elif n == 3 and settings["prefer_sarrus"]:
            method = "sarrus"
        else:
            method = "cofactor"
    if method not in _METHOD_ORDERS:
        raise InvalidOperandError(f"Unknown determinant method {method!r}.")
    order = _METHOD_ORDERS[method]
    if order is not None and n != order:
        raise DimensionMismatchError(
            f"The {method} method only applies to {order}x{order} matrices, got {n}x{n}."
        )

    steps = [{
        "description": "The matrix",
        "expression": _grid(m),
        "explanation": f"A {n}×{n} matrix; its determinant is a single number.",
    }]
    if method == "single":
        steps.append({
            "description": "A 1×1 determinant",
            "expression": f"det = {det.to_display_form()}",
            "explanation": "The determinant of a 1×1 matrix is its only entry.",
        })
        method_info = ("Single entry", "The determinant of [a] is a.")
    elif method == "closed-form":
        steps.extend(_closed_form_steps(m, det))
        method_info = ("2×2 closed form", "det = ad − bc.")
    elif method == "sarrus":
        steps.extend(_sarrus_steps(m, det))
        method_info = (
            "Rule of Sarrus",
            "Downward diagonal products minus upward diagonal products.",
        )
    else:
        if line is None:
            line, index = best_expansion_line(m)
        elif index is None:
            index = 0
        steps.extend(_cofactor_steps(m, det, line, index))
        method_info = (
            "Cofactor (Laplace) expansion",
            "Signed sum of elements times the determinants of their minors.",
        )
    _number_steps(steps)

    expected = m.to_sympy().det()
    holds = expected == det.to_sympy()
    verification_steps = [{
        "description": "Cross-check with SymPy",
        "expression": f"sympy.Matrix(...).det() = {expected}",
        "explanation": (
            "An independent exact computation "
            f"{'agrees' if holds else 'DISAGREES'} with the walkthrough."
        ),
    }]
    _number_steps(verification_steps)

    return {
        "equation": f"det of a {n}×{n} matrix",
        "given": {
            "problem": "Evaluate the determinant",
            "inputs": {"matrix": _grid(m), "order": str(n)},
        },
        "method": {
            "name": method_info[0],
            "description": method_info[1],
            "parameters": {"order": str(n), "method": method},
        },
        "steps": steps,
        "final_answer": f"det(A) = {_approx(det, settings['decimal_places'])}",
        "determinant": det.to_display_form(),
        "verification_steps": verification_steps,
        "summary": _summary(t_start, steps, verification_steps,
                            "pass" if holds else "fail"),
    }


# ── Cramer's Rule ───────────────────────────────────────────────────────

def explain_cramer(coefficients, constants, variables=None) -> dict:
    """Walk through Cramer's Rule for ``A x = b``."""
    t_start = time.perf_counter()
    a = as_matrix(coefficients)
    if not a.is_square():
        raise DimensionMismatchError(
            f"Cramer's Rule needs a square coefficient matrix, got {a.rows}x{a.cols}."
        )
    b = [Rational.coerce(v) for v in constants]
    if len(b) != a.rows:
        raise DimensionMismatchError(f"Expected {a.rows} constants, got {len(b)}.")
    n = a.rows
    names = _variable_names(n, variables)
    settings = config.get_settings()
    places = settings["decimal_places"]
    max_order = settings["max_order"]
    equations = a.augment(b).equations(names)
    equation = ", ".join(equations)

    given = {
        "problem": "Solve the system with Cramer's Rule",
        "inputs": {
            "equations": equation,
            "variables": ", ".join(names),
            "number_of_variables": str(n),
        },
    }
    method = {
        "name": "Cramer's Rule",
        "description": "Each unknown is det(A_k) / det(A).",
        "parameters": {"order": str(n), "variables": ", ".join(names)},
    }
    steps = [{
        "description": "System of equations",
        "expression": "\n".join(f"  ({i + 1})  {eq}" for i, eq in enumerate(equations)),
        "explanation": f"{n} equation(s) with {n} unknown(s): {', '.join(names)}.",
    }]

    det_a = determinant(a, max_order=max_order)
    steps.append({
        "description": "Determinant of A",
        "expression": f"{_grid(a)}\ndet(A) = {det_a.to_display_form()}",
        "explanation": "Cramer's Rule works only when det(A) ≠ 0.",
    })
    if det_a.is_zero():
        LOG.debug("explain_cramer: singular system %s", equation)
        return _singular_result(equation, given, method, steps, t_start, det_a)

    values = []
    for k, name in enumerate(names):
        a_k = cramer_matrix(a, b, k)
        det_k = determinant(a_k, max_order=max_order)
        value = det_k.divide(det_a)
        values.append(value)
        steps.append({
            "description": f"Build A{k + 1}",
            "expression": _grid(a_k),
            "explanation": f"Replace column {k + 1} of A with the constants.",
        })
        steps.append({
            "description": f"Determinant of A{k + 1}",
            "expression": f"det(A{k + 1}) = {det_k.to_display_form()}",
            "explanation": f"Evaluate the determinant of A{k + 1}.",
        })
        steps.append({
            "description": f"Solve for {name}",
            "expression": (
                f"{name} = {det_k.to_display_form()} / {det_a.to_display_form()} "
                f"= {value.to_display_form()}"
            ),
            "explanation": f"{name} = det(A{k + 1}) / det(A).",
        })
    steps.append({
        "description": "Solution",
        "expression": "\n".join(f"{nm} = {v.to_display_form()}" for nm, v in zip(names, values)),
        "explanation": "Values that satisfy all equations simultaneously.",
    })
    _number_steps(steps)

    verification_steps, ok = _verify_system(a, b, values, names)
    return {
        "equation": equation,
        "given": given,
        "method": method,
        "steps": steps,
        "final_answer": "\n".join(f"{nm} = {_approx(v, places)}" for nm, v in zip(names, values)),
        "solution": [v.to_display_form() for v in values],
        "verification_steps": verification_steps,
        "summary": _summary(t_start, steps, verification_steps, "pass" if ok else "fail"),
    }


# ── Gauss-Jordan inversion ──────────────────────────────────────────────

def explain_gauss_jordan(coefficients, constants, variables=None) -> dict:
    """Walk through ``[A | I] -> [I | A⁻¹]`` and ``x = A⁻¹ b``."""
    t_start = time.perf_counter()
    a = as_matrix(coefficients)
    if constants is None:
        raise DimensionMismatchError("No constants vector was given.")
    inverter = GaussJordanInverter(a, constants)
    b = inverter.constants
    n = inverter.size
    names = _variable_names(n, variables)
    settings = config.get_settings()
    places = settings["decimal_places"]
    max_order = settings["max_order"]
    equations = a.augment(b).equations(names)
    equation = ", ".join(equations)

    given = {
        "problem": "Solve the system with the inverse matrix",
        "inputs": {
            "equations": equation,
            "variables": ", ".join(names),
            "number_of_variables": str(n),
        },
    }
    method = {
        "name": "Gauss-Jordan inversion",
        "description": "Row-reduce [A | I] to [I | A⁻¹], then x = A⁻¹ · b.",
        "parameters": {"order": str(n), "variables": ", ".join(names)},
    }
    steps = [{
        "description": "Build the augmented matrix [A | I]",
        "expression": _grid(inverter.augmented, n),
        "explanation": "Write the identity matrix to the right of A.",
    }]

    det_a = determinant(a, max_order=max_order)
    if det_a.is_zero():
        return _singular_result(equation, given, method, steps, t_start, det_a)

    for op in run_to_identity(inverter):
        steps.append(_operation_step(op, inverter.augmented, n))
    inverse = inverter.extract_inverse()
    steps.append({
        "description": "Read off the inverse",
        "expression": _grid(inverse),
        "explanation": "The left block is now I, so the right block is A⁻¹.",
    })
    values = inverter.solve()
    steps.append({
        "description": "Multiply A⁻¹ by the constants",
        "expression": "\n".join(
            f"{nm} = " + " + ".join(f"{_num(c)}·{_num(bj)}" for c, bj in zip(inverse.data[i], b))
            + f" = {values[i].to_display_form()}"
            for i, nm in enumerate(names)
        ),
        "explanation": "x = A⁻¹ · b, one row of A⁻¹ per unknown.",
    })
    _number_steps(steps)

    verification_steps, ok = _verify_system(a, b, values, names)
    return {
        "equation": equation,
        "given": given,
        "method": method,
        "steps": steps,
        "final_answer": "\n".join(f"{nm} = {_approx(v, places)}" for nm, v in zip(names, values)),
        "solution": [v.to_display_form() for v in values],
        "inverse": [[c.to_display_form() for c in r] for r in inverse.data],
        "operation_count": inverter.operation_count,
        "verification_steps": verification_steps,
        "summary": _summary(t_start, steps, verification_steps, "pass" if ok else "fail"),
    }


# ── Gaussian elimination + back-substitution ────────────────────────────

def explain_elimination(augmented, variables=None, reduced: bool = False) -> dict:
    """Reduce an augmented matrix to (reduced) row-echelon form and solve it."""
    t_start = time.perf_counter()
    original = as_matrix(augmented)
    if original.cols < 2:
        raise DimensionMismatchError("An augmented matrix needs a constants column.")
    n_vars = original.cols - 1
    names = _variable_names(n_vars, variables)
    places = config.get_settings()["decimal_places"]
    equations = original.equations(names)
    equation = ", ".join(equations)
    form = "reduced row-echelon form" if reduced else "row-echelon form"

    given = {
        "problem": "Solve the system by Gaussian elimination",
        "inputs": {
            "equations": equation,
            "variables": ", ".join(names),
            "number_of_equations": str(original.rows),
            "number_of_variables": str(n_vars),
        },
    }
    method = {
        "name": "Gauss-Jordan elimination" if reduced else "Gaussian elimination",
        "description": f"Row-reduce to {form}, then back-substitute.",
        "parameters": {"target_form": form, "variables": ", ".join(names)},
    }
    steps = [{
        "description": "Augmented matrix",
        "expression": _grid(original, n_vars),
        "explanation": "Coefficients on the left, constants on the right.",
    }]

    m = original.clone()
    for op in auto_reduce(m, reduced=reduced):
        steps.append(_operation_step(op, m, n_vars))
    steps.append({
        "description": f"Matrix in {form}",
        "expression": "\n".join(m.equations(names)),
        "explanation": "Every pivot is 1 and the entries below it are 0."
                       + (" The entries above each pivot are 0 too." if reduced else ""),
    })

    verification_steps = []
    if m.has_no_solution():
        steps.append({
            "description": "Contradiction — No Solution",
            "expression": "0 = c with c ≠ 0",
            "explanation": "A row of zero coefficients has a non-zero constant.",
        })
        final_answer = "No solution — the system is inconsistent."
        status = "pass"
        solution = None
    else:
        values = back_substitute(m)
        lines = []
        for nm, v in zip(names, values):
            lines.append(f"{nm}  (free variable)" if v is UNRESOLVED
                         else f"{nm} = {_approx(v, places)}")
        steps.append({
            "description": "Back-substitution",
            "expression": "\n".join(lines),
            "explanation": "Solve from the last pivot row upwards.",
        })
        if any(v is UNRESOLVED for v in values):
            final_answer = "Infinite solutions\n" + "\n".join(lines)
            status = "pass"
            solution = [None if v is UNRESOLVED else v.to_display_form() for v in values]
        else:
            a = original.left_block(n_vars)
            b = original.column(n_vars)
            verification_steps, ok = _verify_system(a, b, values, names)
            status = "pass" if ok and verify_solution(a, b, values) else "fail"
            final_answer = "\n".join(lines)
            solution = [v.to_display_form() for v in values]
    _number_steps(steps)

    return {
        "equation": equation,
        "given": given,
        "method": method,
        "steps": steps,
        "final_answer": final_answer,
        "solution": solution,
        "verification_steps": verification_steps,
        "summary": _summary(t_start, steps, verification_steps, status),
    }
