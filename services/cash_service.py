"""
Serviço de caixa: abertura, movimentos, saldo e fechamento com conferência.

Os totais da sessão (entradas, saídas, vendas) são sempre recalculados a
partir de todos os movimentos da sessão, nunca incrementados. Assim, se uma
gravação de totais falhar depois do movimento ser salvo, basta recalcular.
"""
import logging
import math
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from config import settings
from models.cash_movement import CATEGORIAS_MOVIMENTO, TIPOS_MOVIMENTO, CashMovement
from models.cash_session import CashSession
from services.auth_service import UserContext
from services.errors import ConflictError, NotFoundError, ValidationError
from services.store import DocumentStore
from utils.formatters import format_currency

logger = logging.getLogger(__name__)

# Serializa a checagem "não há caixa aberto" + criação dentro do processo.
_abertura_lock = threading.Lock()


@dataclass
class SessionTotals:
    total_entradas: float
    total_saidas: float
    total_vendas: float
    saldo: float


@dataclass
class CloseResult:
    """
    Resultado do fechamento. Diferença = valor contado - saldo calculado.
    Diferença diferente de zero não é erro, apenas é informada.
    """

    session: CashSession
    saldo_esperado: float
    diferenca: float

    @property
    def conferido(self) -> bool:
        return self.diferenca == 0.0


def sum_movements(movimentos: Iterable[CashMovement]) -> tuple[float, float, float]:
    entradas = saidas = vendas = 0.0
    for m in movimentos:
        if m.tipo == "entrada":
            entradas += m.valor
        else:
            saidas += m.valor
        if m.categoria == "venda":
            vendas += m.valor
    return round(entradas, 2), round(saidas, 2), round(vendas, 2)


def current_balance(session: CashSession, movimentos: Iterable[CashMovement]) -> float:
    """
    Saldo = valor de abertura + entradas - saídas.
    """
    entradas, saidas, _ = sum_movements(movimentos)
    return round(session.valor_abertura + entradas - saidas, 2)


class CashService:
    @staticmethod
    def get_current_session(db: Session) -> Optional[CashSession]:
        """Sessão aberta mais recente, se houver."""
        abertas = DocumentStore(db).fetch_where("sessions", status="aberta")
        return abertas[-1] if abertas else None

    @staticmethod
    def get_session(db: Session, session_id: int) -> CashSession:
        session = DocumentStore(db).fetch_by_id("sessions", session_id)
        if session is None:
            raise NotFoundError(f"Sessão de caixa {session_id} não encontrada.")
        return session

    @staticmethod
    def open_session(
        db: Session,
        valor_abertura: float,
        actor: UserContext,
        observacao: Optional[str] = None,
    ) -> CashSession:
        if valor_abertura is None or valor_abertura < 0:
            raise ValidationError("O valor de abertura não pode ser negativo.")

        with _abertura_lock:
            aberta = CashService.get_current_session(db)
            if aberta:
                raise ConflictError(
                    f"Já existe um caixa aberto (sessão {aberta.id})."
                )
            session = DocumentStore(db).create(
                "sessions",
                data_abertura=datetime.now(),
                valor_abertura=float(valor_abertura),
                total_entradas=0.0,
                total_saidas=0.0,
                total_vendas=0.0,
                status="aberta",
                operador_abertura=actor.email,
                observacao=observacao or None,
            )

        logger.info(
            "Caixa %s aberto por %s com %s",
            session.id,
            actor.email,
            format_currency(session.valor_abertura),
        )
        return session

    @staticmethod
    def get_movements(db: Session, session_id: int) -> List[CashMovement]:
        """Movimentos da sessão, mais recentes primeiro."""
        movimentos = DocumentStore(db).fetch_where("movements", cash_session_id=session_id)
        return sorted(movimentos, key=lambda m: (m.created_at, m.id), reverse=True)

    @staticmethod
    def record_movement(
        db: Session,
        session_id: int,
        tipo: str,
        categoria: str,
        valor: float,
        descricao: str,
        actor: UserContext,
        order_id: Optional[int] = None,
    ) -> CashMovement:
        if tipo not in TIPOS_MOVIMENTO:
            raise ValidationError(f"Tipo de movimento inválido: {tipo}")
        if categoria not in CATEGORIAS_MOVIMENTO:
            raise ValidationError(f"Categoria de movimento inválida: {categoria}")
        if valor is None or not math.isfinite(valor) or valor <= 0:
            raise ValidationError("O valor do movimento deve ser maior que zero.")
        if not (descricao or "").strip():
            raise ValidationError("Informe a descrição do movimento.")

        store = DocumentStore(db)
        session = store.fetch_by_id("sessions", session_id)
        if session is None:
            raise ValidationError(f"Sessão de caixa {session_id} não encontrada.")
        if not session.aberta:
            raise ConflictError(f"A sessão de caixa {session_id} está fechada.")

        movimento = store.create(
            "movements",
            cash_session_id=session_id,
            tipo=tipo,
            categoria=categoria,
            valor=round(float(valor), 2),
            descricao=descricao.strip(),
            order_id=order_id,
            criado_por=actor.email,
            created_at=datetime.now(),
        )
        CashService.refresh_totals(db, session_id)
        logger.info(
            "Movimento %s (%s/%s) de %s na sessão %s",
            movimento.id,
            tipo,
            categoria,
            format_currency(movimento.valor),
            session_id,
        )
        return movimento

    @staticmethod
    def refresh_totals(db: Session, session_id: int) -> CashSession:
        """
        Recalcula e grava os totais da sessão a partir de todos os movimentos.
        """
        movimentos = CashService.get_movements(db, session_id)
        entradas, saidas, vendas = sum_movements(movimentos)
        return DocumentStore(db).update(
            "sessions",
            session_id,
            total_entradas=entradas,
            total_saidas=saidas,
            total_vendas=vendas,
        )

    @staticmethod
    def session_totals(db: Session, session_id: int) -> SessionTotals:
        """
        Totais e saldo calculados na hora, sem confiar nos campos gravados.
        """
        session = CashService.get_session(db, session_id)
        movimentos = CashService.get_movements(db, session_id)
        entradas, saidas, vendas = sum_movements(movimentos)
        return SessionTotals(
            total_entradas=entradas,
            total_saidas=saidas,
            total_vendas=vendas,
            saldo=current_balance(session, movimentos),
        )

    @staticmethod
    def close_session(
        db: Session,
        session_id: int,
        valor_contado: float,
        actor: UserContext,
    ) -> CloseResult:
        if valor_contado is None or valor_contado < 0:
            raise ValidationError("O valor contado não pode ser negativo.")

        session = CashService.get_session(db, session_id)
        if not session.aberta:
            raise ConflictError(f"A sessão de caixa {session_id} já está fechada.")

        saldo = current_balance(session, CashService.get_movements(db, session_id))
        diferenca = round(float(valor_contado) - saldo, 2)
        if abs(diferenca) < settings.VARIANCE_TOLERANCE:
            diferenca = 0.0

        session = DocumentStore(db).update(
            "sessions",
            session_id,
            status="fechada",
            valor_fechamento=float(valor_contado),
            operador_fechamento=actor.email,
            data_fechamento=datetime.now(),
        )
        if diferenca:
            logger.warning(
                "Caixa %s fechado por %s com diferença de %s (esperado %s)",
                session_id,
                actor.email,
                format_currency(diferenca),
                format_currency(saldo),
            )
        else:
            logger.info("Caixa %s fechado por %s sem diferença", session_id, actor.email)
        return CloseResult(session=session, saldo_esperado=saldo, diferenca=diferenca)

    @staticmethod
    def get_sessions_by_period(
        db: Session, inicio: datetime, fim: datetime
    ) -> List[CashSession]:
        return DocumentStore(db).fetch_range("sessions", "data_abertura", inicio, fim)
