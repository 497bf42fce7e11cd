"""Static checks for public API invocation instrumentation decorators.

These checks enforce that each implementation decorates every public method
declared by its contract class with shared public API instrumentation.
"""

from __future__ import annotations

import ast
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[2]

_CONTRACTS = (
    (
        "services/state/approle_role/service.py",
        "AppRoleRoleService",
        "services/state/approle_role/implementation.py",
        "DefaultAppRoleRoleService",
    ),
    (
        "resources/adapters/vault/adapter.py",
        "VaultAdapter",
        "resources/adapters/vault/vault_adapter.py",
        "HttpVaultAdapter",
    ),
)


@pytest.mark.parametrize(
    ("contract_file", "contract_class", "impl_file", "impl_class"), _CONTRACTS
)
def test_implementations_decorate_contract_methods(
    contract_file: str, contract_class: str, impl_file: str, impl_class: str
) -> None:
    """Require instrumentation on every public method of each contract."""
    contract_methods = _public_method_names(
        file_path=_REPO_ROOT / contract_file, class_name=contract_class
    )
    decorated_methods = _decorated_public_api_methods(
        file_path=_REPO_ROOT / impl_file, class_name=impl_class
    )

    assert contract_methods, f"{contract_class} declares no public methods"
    missing = sorted(contract_methods - decorated_methods)
    assert not missing, (
        f"Missing @public_api_instrumented on {impl_class} methods: {missing}"
    )


def _public_method_names(*, file_path: Path, class_name: str) -> set[str]:
    """Return non-private method names declared directly on one class."""
    class_node = _class_node(file_path=file_path, class_name=class_name)
    names: set[str] = set()
    for node in class_node.body:
        if not isinstance(node, ast.FunctionDef):
            continue
        if node.name.startswith("_"):
            continue
        names.add(node.name)
    return names


def _decorated_public_api_methods(*, file_path: Path, class_name: str) -> set[str]:
    """Return method names decorated with ``@public_api_instrumented``."""
    class_node = _class_node(file_path=file_path, class_name=class_name)
    names: set[str] = set()
    for node in class_node.body:
        if not isinstance(node, ast.FunctionDef):
            continue
        if node.name.startswith("_"):
            continue
        if _has_public_api_instrumented(node):
            names.add(node.name)
    return names


def _class_node(*, file_path: Path, class_name: str) -> ast.ClassDef:
    """Load and return one named class node from a Python module."""
    source = file_path.read_text(encoding="utf-8")
    module = ast.parse(source)
    for node in module.body:
        if isinstance(node, ast.ClassDef) and node.name == class_name:
            return node
    raise AssertionError(f"Class not found: {class_name} in {file_path}")


def _has_public_api_instrumented(node: ast.FunctionDef) -> bool:
    """Return whether method decorators include ``@public_api_instrumented``."""
    for decorator in node.decorator_list:
        if (
            isinstance(decorator, ast.Name)
            and decorator.id == "public_api_instrumented"
        ):
            return True
        if (
            isinstance(decorator, ast.Call)
            and isinstance(decorator.func, ast.Name)
            and decorator.func.id == "public_api_instrumented"
        ):
            return True
    return False
