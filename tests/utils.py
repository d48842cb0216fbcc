# tests/utils.py
"""Contract texts and builders shared by the test modules."""

COUPON_BLOCK = """\
---
name: validate_coupon
language: python
version: "1.0"
---
SIGNATURE: def validate_coupon(code: str, cart_total: float) -> tuple[bool, str]
INTENT: Decide whether a coupon code can be applied to a cart.
BEHAVIOR:
  - WHEN code is empty THEN return (False, "Coupon code cannot be empty")
  - WHEN cart_total < 10 THEN return (False, "Cart total too low")
  - WHEN code is unknown THEN raise ValueError("Unknown coupon")
  - OTHERWISE return (True, "")
TESTS:
  - validate_coupon("", 50) == (False, "Coupon code cannot be empty")
  - validate_coupon("SAVE10", 5) == (False, "Cart total too low")
  - validate_coupon("NOPE", 50) raises ValueError("Unknown coupon")
  - validate_coupon("SAVE10", 50) == (True, "")
CONSTRAINTS:
  - cart_total: must be at least 10
EDGE_CASES:
  - code: "" returns the empty-code error
"""

COUPON_INLINE = """\
---
name: validate_coupon
language: python
version: "1.0"
---
# validate_coupon

**SIGNATURE:** `def validate_coupon(code: str, cart_total: float) -> tuple[bool, str]`

**INTENT:** Decide whether a coupon code can be applied to a cart.

**BEHAVIOR:**
- WHEN code is empty THEN return `(False, "Coupon code cannot be empty")`
- WHEN cart_total < 10 THEN return `(False, "Cart total too low")`
- WHEN code is unknown THEN raise `ValueError("Unknown coupon")`
- OTHERWISE return `(True, "")`

**TESTS:**
- `validate_coupon("", 50) == (False, "Coupon code cannot be empty")`
- `validate_coupon("SAVE10", 5) == (False, "Cart total too low")`
- `validate_coupon("NOPE", 50) raises ValueError("Unknown coupon")`
- `validate_coupon("SAVE10", 50) == (True, "")`

**CONSTRAINTS:**
- cart_total: must be at least 10

**EDGE_CASES:**
- code: "" returns the empty-code error
"""

AGE_BASELINE = """\
SIGNATURE: def check_age(age: int) -> str
INTENT: Classify a person by age.
BEHAVIOR:
  - WHEN age < 0 THEN raise ValueError
  - WHEN age < 18 THEN return "minor"
  - OTHERWISE return "adult"
TESTS:
  - check_age(-1) raises ValueError
  - check_age(10) == "minor"
  - check_age(30) == "adult"
"""


def make_contract(rules, tests, *, signature="def f(x: int) -> int", intent="Compute f.", extra="") -> str:
    """Assemble a block-notation contract from rule and test lines."""
    lines = [f"SIGNATURE: {signature}", f"INTENT: {intent}", "BEHAVIOR:"]
    lines += [f"  - {r}" for r in rules]
    lines.append("TESTS:")
    lines += [f"  - {t}" for t in tests]
    text = "\n".join(lines) + "\n"
    if extra:
        text += extra if extra.endswith("\n") else extra + "\n"
    return text

