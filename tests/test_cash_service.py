import pytest

from models.cash_session import CashSession
from services.cash_service import CashService, current_balance
from services.errors import ConflictError, NotFoundError, ValidationError
from services.store import DocumentStore


def test_open_session_starts_with_zero_totals(db, operador):
    session = CashService.open_session(db, 100.0, operador)

    assert session.status == "aberta"
    assert session.valor_abertura == 100.0
    assert session.operador_abertura == operador.email
    assert (session.total_entradas, session.total_saidas, session.total_vendas) == (0, 0, 0)
    assert CashService.get_current_session(db).id == session.id


def test_open_session_fails_when_another_is_open(db, operador, admin):
    CashService.open_session(db, 50.0, operador)

    with pytest.raises(ConflictError):
        CashService.open_session(db, 80.0, admin)


def test_open_session_allowed_after_close(db, operador):
    first = CashService.open_session(db, 50.0, operador)
    CashService.close_session(db, first.id, 50.0, operador)

    second = CashService.open_session(db, 20.0, operador)
    assert second.id != first.id


def test_open_session_rejects_negative_float(db, operador):
    with pytest.raises(ValidationError):
        CashService.open_session(db, -1.0, operador)


def test_balance_and_variance_scenario(db, operador):
    session = CashService.open_session(db, 100.0, operador)
    CashService.record_movement(db, session.id, "entrada", "venda", 50.0, "Pedido #1", operador)
    CashService.record_movement(db, session.id, "saida", "despesa", 20.0, "Gelo", operador)

    movimentos = CashService.get_movements(db, session.id)
    assert current_balance(session, movimentos) == 130.0

    result = CashService.close_session(db, session.id, 125.0, operador)
    assert result.saldo_esperado == 130.0
    assert result.diferenca == -5.0
    assert not result.conferido
    assert result.session.status == "fechada"
    assert result.session.valor_fechamento == 125.0
    assert result.session.operador_fechamento == operador.email
    assert result.session.data_fechamento is not None


def test_close_without_variance(db, operador):
    session = CashService.open_session(db, 100.0, operador)
    CashService.record_movement(db, session.id, "entrada", "venda", 50.0, "Pedido #1", operador)
    CashService.record_movement(db, session.id, "saida", "despesa", 20.0, "Gelo", operador)

    result = CashService.close_session(db, session.id, 130.0, operador)
    assert result.diferenca == 0.0
    assert result.conferido


def test_float_noise_is_not_variance(db, operador):
    session = CashService.open_session(db, 0.1, operador)
    CashService.record_movement(db, session.id, "entrada", "outros", 0.2, "Troco", operador)

    result = CashService.close_session(db, session.id, 0.3, operador)
    assert result.diferenca == 0.0


def test_one_cent_is_reported(db, operador):
    session = CashService.open_session(db, 10.0, operador)

    result = CashService.close_session(db, session.id, 9.99, operador)
    assert result.diferenca == -0.01


def test_close_twice_fails(db, operador):
    session = CashService.open_session(db, 10.0, operador)
    CashService.close_session(db, session.id, 10.0, operador)

    with pytest.raises(ConflictError):
        CashService.close_session(db, session.id, 10.0, operador)


def test_close_unknown_session(db, operador):
    with pytest.raises(NotFoundError):
        CashService.close_session(db, 999, 10.0, operador)


@pytest.mark.parametrize(
    "tipo,categoria,valor,descricao",
    [
        ("entrada", "venda", 0, "zero"),
        ("entrada", "venda", -5, "negativo"),
        ("entrada", "venda", float("nan"), "nan"),
        ("saida", "despesa", float("inf"), "infinito"),
        ("entrada", "venda", 5, "   "),
        ("transferencia", "venda", 5, "tipo inválido"),
        ("entrada", "gorjeta", 5, "categoria inválida"),
    ],
)
def test_record_movement_validation(db, operador, tipo, categoria, valor, descricao):
    session = CashService.open_session(db, 10.0, operador)

    with pytest.raises(ValidationError):
        CashService.record_movement(db, session.id, tipo, categoria, valor, descricao, operador)
    assert CashService.get_movements(db, session.id) == []


def test_record_movement_unknown_session(db, operador):
    with pytest.raises(ValidationError):
        CashService.record_movement(db, 42, "entrada", "venda", 5, "x", operador)


def test_record_movement_on_closed_session(db, operador):
    session = CashService.open_session(db, 10.0, operador)
    CashService.close_session(db, session.id, 10.0, operador)

    with pytest.raises(ConflictError):
        CashService.record_movement(db, session.id, "entrada", "venda", 5, "x", operador)


def test_totals_are_rederived_from_movement_log(db, operador):
    session = CashService.open_session(db, 100.0, operador)
    CashService.record_movement(db, session.id, "entrada", "venda", 30.0, "Pedido #1", operador)
    CashService.record_movement(db, session.id, "entrada", "suprimento", 50.0, "Reforço", operador)
    CashService.record_movement(db, session.id, "saida", "retirada", 40.0, "Sangria", operador)

    # Simula uma gravação de totais perdida
    DocumentStore(db).update("sessions", session.id, total_entradas=0.0, total_vendas=0.0)

    totals = CashService.session_totals(db, session.id)
    assert totals.total_entradas == 80.0
    assert totals.total_saidas == 40.0
    assert totals.total_vendas == 30.0
    assert totals.saldo == 140.0

    refreshed = CashService.refresh_totals(db, session.id)
    assert refreshed.total_entradas == 80.0
    assert refreshed.total_vendas == 30.0


def test_balance_matches_log_for_many_movements(db, operador):
    session = CashService.open_session(db, 37.5, operador)
    valores = [("entrada", 12.35), ("saida", 3.1), ("entrada", 0.05), ("saida", 7.0), ("entrada", 19.99)]
    for tipo, valor in valores:
        CashService.record_movement(db, session.id, tipo, "outros", valor, "mov", operador)

    esperado = 37.5 + sum(v for t, v in valores if t == "entrada") - sum(
        v for t, v in valores if t == "saida"
    )
    session = db.get(CashSession, session.id)
    assert CashService.session_totals(db, session.id).saldo == pytest.approx(esperado, abs=0.001)
    assert session.total_entradas - session.total_saidas == pytest.approx(esperado - 37.5, abs=0.001)


def test_movements_newest_first(db, operador):
    session = CashService.open_session(db, 0.0, operador)
    primeiro = CashService.record_movement(db, session.id, "entrada", "venda", 1, "a", operador)
    segundo = CashService.record_movement(db, session.id, "entrada", "venda", 2, "b", operador)

    ids = [m.id for m in CashService.get_movements(db, session.id)]
    assert ids == [segundo.id, primeiro.id]
