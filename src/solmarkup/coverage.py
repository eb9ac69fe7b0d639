"""Documentation validation and coverage checks."""

from __future__ import annotations

from collections import defaultdict

from solmarkup.models import ContractInfo, Documentation, ValidationResult

# Declaration kinds expected to carry a notice or dev text
CHECKED_NODE_TYPES = frozenset(
    {
        "FunctionDefinition",
        "EventDefinition",
        "ErrorDefinition",
        "ModifierDefinition",
    }
)


def _is_documented(doc: Documentation) -> bool:
    return bool(doc.natspec.notice or doc.natspec.dev)


def _checked(info: ContractInfo) -> list[Documentation]:
    return [doc for doc in info.all_documentation() if doc.node_type in CHECKED_NODE_TYPES]


def validate_docs(contracts: list[ContractInfo], strict: bool = False) -> ValidationResult:
    """Validate resolved documentation.

    Checks:
    1. Functions, events, errors and modifiers should have a notice or dev text
       (warning in normal mode, error in strict)
    2. NatSpec problems reported while parsing (warning in normal mode, error in strict)
    3. Documented functions should describe every output (warning)

    Args:
        contracts: Parsed contracts
        strict: If True, missing docs and reported problems are errors instead of warnings

    Returns:
        ValidationResult with errors and warnings
    """
    result = ValidationResult()
    report = result.errors if strict else result.warnings

    for info in contracts:
        report.extend(info.issues)

        for doc in _checked(info):
            label = f"{info.name}.{doc.title}"
            if not _is_documented(doc):
                report.append(f"{label}: missing @notice or @dev (undocumented)")
                continue

            is_function = doc.node_type == "FunctionDefinition"
            if is_function and len(doc.natspec.returns) < doc.output_count:
                result.warnings.append(f"{label}: documented but missing @return")

    return result


def compute_coverage(contracts: list[ContractInfo]) -> dict[str, float]:
    """Compute documentation coverage by contract kind.

    Returns:
        Dict keyed by contract kind ("contract", "interface", "library") plus
        "total", each 0.0 - 1.0. Kinds with nothing to document count as 1.0.
    """
    totals: dict[str, int] = defaultdict(int)
    documented: dict[str, int] = defaultdict(int)

    for info in contracts:
        for doc in _checked(info):
            for key in (info.contract_kind, "total"):
                totals[key] += 1
                documented[key] += _is_documented(doc)

    coverage = {"total": 1.0}
    for info in contracts:
        coverage.setdefault(info.contract_kind, 1.0)
    for key, total in totals.items():
        coverage[key] = documented[key] / total
    return coverage
