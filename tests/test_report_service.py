from datetime import date, datetime, timedelta

import pytest

from services.auth_service import AuthService
from services.cash_service import CashService
from services.order_service import Cart, OrderService, add_line_item
from services.rating_service import RatingService
from services.report_service import ReportService
from services.store import DocumentStore
from utils.periods import day_bounds, get_period


@pytest.fixture
def periodo():
    agora = datetime.now()
    return agora - timedelta(hours=1), agora + timedelta(hours=1)


def test_financial_report(db, operador, cafe, pao_de_queijo, periodo):
    session = CashService.open_session(db, 100.0, operador)
    OrderService.finalize_order(db, add_line_item(Cart(), cafe), operador, cliente="Maria")
    second = OrderService.finalize_order(
        db, add_line_item(add_line_item(Cart(), cafe), pao_de_queijo), operador
    )
    OrderService.record_payment(db, second.id, operador)
    CashService.record_movement(db, session.id, "saida", "despesa", 7.5, "Leite", operador)

    report = ReportService.financial_report(db, *periodo)

    resumo = report["resumo"]
    assert resumo["total_vendas"] == 25.0
    assert resumo["quantidade_pedidos"] == 2
    assert resumo["ticket_medio"] == 12.5
    assert resumo["total_entradas"] == 15.0
    assert resumo["total_saidas"] == 7.5
    assert resumo["saldo_liquido"] == 7.5
    assert [v["pedido"] for v in report["vendas"]] == [1, 2]
    assert report["vendas"][1]["cliente"] is None
    assert len(report["movimentacoes"]) == 2


def test_financial_report_filters(db, operador, cafe, periodo):
    OrderService.finalize_order(db, add_line_item(Cart(), cafe), operador, cliente="Maria")
    OrderService.finalize_order(db, add_line_item(Cart(), cafe), operador, cliente="João")

    report = ReportService.financial_report(db, *periodo, cliente="Maria", status="todos")
    assert report["resumo"]["quantidade_pedidos"] == 1

    report = ReportService.financial_report(db, *periodo, status="entregue")
    assert report["resumo"]["quantidade_pedidos"] == 0
    assert report["resumo"]["ticket_medio"] == 0.0


def test_financial_report_empty_period(db):
    inicio, fim = day_bounds(date(2001, 1, 1), date(2001, 1, 31))
    report = ReportService.financial_report(db, inicio, fim)

    assert report["resumo"]["total_vendas"] == 0.0
    assert report["vendas"] == []
    assert report["movimentacoes"] == []


def test_administrative_report(db, cafe, periodo):
    AuthService.create_user(db, "ana@cafe.local", "Ana", "123", "operador")
    AuthService.create_user(db, "bruno@cafe.local", "Bruno", "123", "cozinheiro")
    ana = AuthService.sign_in(db, "ana@cafe.local", "123")
    OrderService.finalize_order(db, add_line_item(Cart(), cafe), ana)
    OrderService.finalize_order(db, add_line_item(Cart(), cafe), ana)
    RatingService.create_rating(
        db, {"atendimento": 4, "produtos": 4, "ambiente": 4, "rapidez": 4}, variante="quatro"
    )

    report = ReportService.administrative_report(db, *periodo, variante_avaliacao="quatro")

    por_email = {u["email"]: u for u in report["usuarios"]}
    assert por_email["ana@cafe.local"]["pedidos_criados"] == 2
    assert por_email["ana@cafe.local"]["dias_trabalhados"] == 1
    assert por_email["ana@cafe.local"]["ultimo_acesso"]
    assert por_email["bruno@cafe.local"]["pedidos_criados"] == 0
    assert por_email["bruno@cafe.local"]["ultimo_acesso"] == ""
    assert report["avaliacoes"]["total"] == 1
    assert report["avaliacoes"]["media_geral"] == 4.0


def test_get_period():
    hoje = date(2026, 10, 18)
    assert get_period("Diário", hoje) == (hoje, hoje)
    assert get_period("Semanal", hoje) == (date(2026, 10, 12), hoje)
    assert get_period("Mensal", hoje) == (date(2026, 10, 1), hoje)
    assert get_period("Geral", hoje)[0] == date(2000, 1, 1)
    with pytest.raises(ValueError):
        get_period("Anual", hoje)


def test_daily_report_includes_late_evening_order(db, operador, cafe):
    order = OrderService.finalize_order(db, add_line_item(Cart(), cafe), operador)
    DocumentStore(db).update("orders", order.id, created_at=datetime(2026, 10, 17, 22, 0))

    report = ReportService.financial_report(
        db, *day_bounds(*get_period("Diário", hoje=date(2026, 10, 17)))
    )
    assert [v["pedido"] for v in report["vendas"]] == [order.numero]

    report = ReportService.financial_report(
        db, *day_bounds(*get_period("Diário", hoje=date(2026, 10, 18)))
    )
    assert report["vendas"] == []


def test_daily_report_uses_same_clock_as_orders(db, operador, cafe):
    OrderService.finalize_order(db, add_line_item(Cart(), cafe), operador)

    report = ReportService.financial_report(db, *day_bounds(*get_period("Diário")))
    assert report["resumo"]["quantidade_pedidos"] == 1
