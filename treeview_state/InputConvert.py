# === SECTION: InputConvert [id: InputConvert]===
from __future__ import annotations

import math
from typing import Any

import sympy as sp


def InputConvert(obj: Any) -> float:
    """
    Convert `obj` to a real ``float``.

    Rules:
    - If `obj` is a number: cast via ``float``. ``bool`` is rejected.
    - If `obj` is a string:
        1) try ``float(s)``
        2) else parse as a SymPy expression (``"1/3"``, ``"sqrt(2)"``), then evaluate.
    - Anything else is passed through ``complex()`` as a last resort.

    Complex values are accepted only when the imaginary part is exactly zero.
    NaN and infinities pass through unchanged; callers decide what they mean.

    Raises
    ------
    ValueError
        If conversion fails or the value is not real.
    """
    if isinstance(obj, bool):
        raise ValueError(f"Could not convert {obj!r} to float: booleans are not coordinates.")

    def _real(x: complex) -> float:
        if x.imag != 0:
            raise ValueError(
                f"Could not convert non-real {x!r} to float: imaginary part is non-zero."
            )
        return float(x.real)

    # Fast path
    if isinstance(obj, int):
        try:
            return float(obj)
        except OverflowError:
            # Too large for a double; keep the sign so callers can clamp or reject.
            return math.copysign(math.inf, obj)
    if isinstance(obj, float):
        return float(obj)
    if isinstance(obj, complex):
        return _real(obj)

    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError("Cannot convert empty string to float.")

        try:
            return float(s)
        except ValueError:
            pass

        try:
            val = complex(sp.sympify(s).evalf())
        except Exception as e:
            raise ValueError(
                f"Could not convert {obj!r} to float (neither directly nor via SymPy)."
            ) from e
        return _real(val)

    try:
        return _real(complex(obj))
    except ValueError:
        raise
    except Exception as e:
        raise ValueError(f"Could not convert {obj!r} to float.") from e


def require_finite(obj: Any, name: str = "value") -> float:
    """Return ``InputConvert(obj)`` or raise ``ValueError`` if it is NaN or infinite."""
    value = InputConvert(obj)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {obj!r}")
    return value
