"""
Relatórios financeiro e administrativo por período.
"""
import logging
from datetime import datetime
from typing import Optional

import pandas as pd
from sqlalchemy.orm import Session

from services.cash_service import CashService
from services.order_service import OrderService
from services.rating_service import RatingService, compute_statistics
from services.store import DocumentStore

logger = logging.getLogger(__name__)

COLUNAS_VENDAS = ["data", "pedido", "total", "itens", "cliente", "status", "criado_por"]
COLUNAS_MOVIMENTOS = ["data", "tipo", "categoria", "descricao", "valor"]


def _periodo(inicio: datetime, fim: datetime) -> dict:
    return {"inicio": inicio.isoformat(), "fim": fim.isoformat()}


def _records(df: pd.DataFrame) -> list[dict]:
    # NaN/NaT viram None para quem consome o relatório
    return df.astype(object).where(df.notna(), None).to_dict("records")


class ReportService:
    @staticmethod
    def sales_frame(orders) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "data": o.created_at,
                    "pedido": o.numero,
                    "total": o.total,
                    "itens": len(o.itens),
                    "cliente": o.cliente,
                    "status": o.status,
                    "criado_por": o.criado_por,
                }
                for o in orders
            ],
            columns=COLUNAS_VENDAS,
        )

    @staticmethod
    def movements_frame(movimentos) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "data": m.created_at,
                    "tipo": m.tipo,
                    "categoria": m.categoria,
                    "descricao": m.descricao,
                    "valor": m.valor,
                }
                for m in movimentos
            ],
            columns=COLUNAS_MOVIMENTOS,
        )

    @staticmethod
    def financial_report(
        db: Session,
        inicio: datetime,
        fim: datetime,
        cliente: Optional[str] = None,
        status: Optional[str] = None,
    ) -> dict:
        """
        Vendas (pedidos) e movimentos de caixa das sessões abertas no período.
        Filtros opcionais por cliente e status ('todos' = sem filtro).
        """
        pedidos = OrderService.get_orders_by_period(db, inicio, fim)
        if cliente:
            pedidos = [p for p in pedidos if (p.cliente or "") == cliente]
        if status and status != "todos":
            pedidos = [p for p in pedidos if p.status == status]

        movimentos = []
        for sessao in CashService.get_sessions_by_period(db, inicio, fim):
            movimentos.extend(CashService.get_movements(db, sessao.id))

        vendas = ReportService.sales_frame(pedidos).sort_values("data", kind="stable")
        movs = ReportService.movements_frame(movimentos).sort_values("data", kind="stable")

        total_vendas = round(float(vendas["total"].sum()), 2)
        total_entradas = round(float(movs.loc[movs["tipo"] == "entrada", "valor"].sum()), 2)
        total_saidas = round(float(movs.loc[movs["tipo"] == "saida", "valor"].sum()), 2)
        quantidade = len(vendas)

        logger.info(
            "Relatório financeiro %s a %s: %s pedidos, %s movimentos",
            inicio.date(),
            fim.date(),
            quantidade,
            len(movs),
        )
        return {
            "periodo": _periodo(inicio, fim),
            "resumo": {
                "total_vendas": total_vendas,
                "total_entradas": total_entradas,
                "total_saidas": total_saidas,
                "saldo_liquido": round(total_entradas - total_saidas, 2),
                "ticket_medio": round(total_vendas / quantidade, 2) if quantidade else 0.0,
                "quantidade_pedidos": quantidade,
            },
            "movimentacoes": _records(movs),
            "vendas": _records(vendas),
        }

    @staticmethod
    def administrative_report(
        db: Session,
        inicio: datetime,
        fim: datetime,
        variante_avaliacao: Optional[str] = None,
    ) -> dict:
        """
        Por usuário: pedidos criados e dias trabalhados (dias distintos com
        pedido) no período. Inclui as estatísticas das avaliações do período.
        """
        pedidos = ReportService.sales_frame(OrderService.get_orders_by_period(db, inicio, fim))
        pedidos["dia"] = pd.to_datetime(pedidos["data"]).dt.date
        por_usuario = pedidos.groupby("criado_por").agg(
            pedidos_criados=("pedido", "count"),
            dias_trabalhados=("dia", "nunique"),
        )

        usuarios = []
        for user in DocumentStore(db).fetch_all("users"):
            linha = por_usuario.loc[user.email] if user.email in por_usuario.index else None
            usuarios.append(
                {
                    "nome": user.nome,
                    "email": user.email,
                    "role": user.role,
                    "pedidos_criados": int(linha["pedidos_criados"]) if linha is not None else 0,
                    "dias_trabalhados": int(linha["dias_trabalhados"]) if linha is not None else 0,
                    "ultimo_acesso": user.ultimo_acesso.isoformat() if user.ultimo_acesso else "",
                }
            )

        avaliacoes = RatingService.get_ratings_by_period(db, inicio, fim)
        return {
            "periodo": _periodo(inicio, fim),
            "usuarios": usuarios,
            "avaliacoes": compute_statistics(avaliacoes, variante_avaliacao),
        }
