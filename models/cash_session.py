from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String
from sqlalchemy.orm import relationship

from config.database import Base


class CashSession(Base):
    """
    Sessões de caixa (abertura/fechamento).
    Apenas uma sessão com status 'aberta' deve existir por vez.
    Os totais são derivados dos movimentos e regravados a cada novo movimento.
    """

    __tablename__ = "cash_sessions"

    id = Column(Integer, primary_key=True, index=True)
    data_abertura = Column(DateTime, nullable=False, default=datetime.now, index=True)
    data_fechamento = Column(DateTime, nullable=True)
    valor_abertura = Column(Float, nullable=False, default=0.0)
    valor_fechamento = Column(Float, nullable=True)
    total_entradas = Column(Float, nullable=False, default=0.0)
    total_saidas = Column(Float, nullable=False, default=0.0)
    total_vendas = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default="aberta", index=True)  # aberta / fechada
    operador_abertura = Column(String(100), nullable=False)
    operador_fechamento = Column(String(100), nullable=True)
    observacao = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    movimentos = relationship(
        "CashMovement", back_populates="sessao", order_by="CashMovement.id"
    )

    @property
    def aberta(self) -> bool:
        return self.status == "aberta"
