import pytest

from services.errors import InvalidTransitionError, PermissionDeniedError
from services.order_workflow import (
    ACCOUNT_WORKFLOW,
    KITCHEN_WORKFLOW,
    get_workflow,
)


def test_get_workflow_by_name():
    assert get_workflow("cozinha") is KITCHEN_WORKFLOW
    assert get_workflow("conta") is ACCOUNT_WORKFLOW


def test_get_workflow_unknown():
    with pytest.raises(ValueError):
        get_workflow("delivery")


def test_default_workflow_comes_from_settings(monkeypatch):
    from config import settings

    monkeypatch.setattr(settings, "ORDER_WORKFLOW", "conta")
    assert get_workflow() is ACCOUNT_WORKFLOW


@pytest.mark.parametrize(
    "atual,alvo,role",
    [
        ("pendente", "preparando", "cozinheiro"),
        ("pendente", "preparando", "admin"),
        ("preparando", "pronto", "cozinheiro"),
        ("pronto", "entregue", "operador"),
        ("pronto", "entregue", "admin"),
    ],
)
def test_kitchen_allowed_edges(atual, alvo, role):
    assert KITCHEN_WORKFLOW.can_transition(atual, alvo, role)
    KITCHEN_WORKFLOW.check_transition(atual, alvo, role)


@pytest.mark.parametrize(
    "atual,alvo",
    [
        ("pendente", "pronto"),
        ("pendente", "entregue"),
        ("preparando", "pendente"),
        ("entregue", "pendente"),
        ("pendente", "pago"),
        ("pendente", "pendente"),
    ],
)
def test_kitchen_missing_edges(atual, alvo):
    with pytest.raises(InvalidTransitionError):
        KITCHEN_WORKFLOW.check_transition(atual, alvo, "admin")


def test_kitchen_role_gates():
    with pytest.raises(PermissionDeniedError):
        KITCHEN_WORKFLOW.check_transition("pendente", "preparando", "operador")
    with pytest.raises(PermissionDeniedError):
        KITCHEN_WORKFLOW.check_transition("pronto", "entregue", "cozinheiro")


def test_account_workflow_any_role():
    for role in ("admin", "operador", "cozinheiro"):
        ACCOUNT_WORKFLOW.check_transition("pendente", "em haver", role)
        ACCOUNT_WORKFLOW.check_transition("em haver", "pago", role)


def test_terminal_and_next_statuses():
    assert KITCHEN_WORKFLOW.is_terminal("entregue")
    assert not KITCHEN_WORKFLOW.is_terminal("pronto")
    assert KITCHEN_WORKFLOW.proximos("pendente") == ("preparando",)
    assert KITCHEN_WORKFLOW.proximos("entregue") == ()
    assert ACCOUNT_WORKFLOW.prioridade("pago") > ACCOUNT_WORKFLOW.prioridade("pendente")
    assert ACCOUNT_WORKFLOW.prioridade("cancelado") == 99
