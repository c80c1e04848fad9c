#!/usr/bin/env python3
"""
Envelope consistency validation script.

Scans the router modules under clearr/api and reports any endpoint whose
return value is not built with ``respond(...)``, the helper that produces
the ``{success, message, data, statusCode}`` envelope.
"""
import ast
import sys
from pathlib import Path
from typing import List, Tuple

ROUTE_METHODS = {"get", "post", "put", "patch", "delete"}


def _is_route(func: ast.AST) -> bool:
    for decorator in getattr(func, "decorator_list", []):
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if isinstance(target, ast.Attribute) and target.attr in ROUTE_METHODS:
            return True
    return False


def _registered_routes(tree: ast.Module) -> set:
    """Handlers registered with ``router.add_api_route(path, handler, ...)``."""
    names = set()
    for node in ast.walk(tree):
        if (
            isinstance(node, ast.Call)
            and isinstance(node.func, ast.Attribute)
            and node.func.attr == "add_api_route"
            and len(node.args) >= 2
            and isinstance(node.args[1], ast.Name)
        ):
            names.add(node.args[1].id)
    return names


def _uses_respond(value: ast.AST) -> bool:
    return (
        isinstance(value, ast.Call)
        and isinstance(value.func, ast.Name)
        and value.func.id == "respond"
    )


def scan_endpoint_file(file_path: Path) -> List[Tuple[int, str]]:
    """Return ``(line, function)`` for every non-envelope return in a router module."""
    tree = ast.parse(file_path.read_text(encoding="utf-8"))
    registered = _registered_routes(tree)
    issues = []

    for node in tree.body:
        if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        if not (_is_route(node) or node.name in registered):
            continue
        for child in ast.walk(node):
            if isinstance(child, ast.Return) and not (child.value and _uses_respond(child.value)):
                issues.append((child.lineno, node.name))

    return issues


def main():
    """Main validation script."""
    project_root = Path(__file__).parent.parent
    api_dir = project_root / "clearr" / "api"

    if not api_dir.exists():
        print(f"Error: API directory not found at {api_dir}")
        sys.exit(1)

    print("🔍 Scanning endpoints for envelope consistency...\n")

    endpoint_files = sorted(api_dir.glob("*_endpoints.py"))
    if not endpoint_files:
        print("Warning: No endpoint files found")
        sys.exit(0)

    total_issues = 0
    for endpoint_file in endpoint_files:
        issues = scan_endpoint_file(endpoint_file)
        if not issues:
            continue
        total_issues += len(issues)
        print(f"❌ {endpoint_file.name}:")
        for line_num, function_name in issues:
            print(f"   {function_name}() line {line_num}: return does not use respond()")
        print()

    print("=" * 60)
    print(f"📊 Scanned {len(endpoint_files)} endpoint files")
    print(f"   Total violations: {total_issues}")
    print("=" * 60)

    if total_issues > 0:
        print("\n⚠️  Envelope consistency check FAILED")
        sys.exit(1)

    print("\n✅ All endpoints use consistent envelope format")
    sys.exit(0)


if __name__ == "__main__":
    main()
