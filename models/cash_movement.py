"""
Movimentos de caixa: cada entrada ou saída de dinheiro durante uma sessão.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from config.database import Base

TIPOS_MOVIMENTO = ("entrada", "saida")
CATEGORIAS_MOVIMENTO = ("venda", "suprimento", "retirada", "despesa", "outros")


class CashMovement(Base):
    """
    Movimento de caixa vinculado a uma sessão. Não é alterado depois de criado.
    """

    __tablename__ = "cash_movements"

    id = Column(Integer, primary_key=True, index=True)
    cash_session_id = Column(
        Integer, ForeignKey("cash_sessions.id"), nullable=False, index=True
    )
    tipo = Column(String(10), nullable=False)  # entrada / saida
    categoria = Column(String(20), nullable=False, default="outros")
    valor = Column(Float, nullable=False)
    descricao = Column(String(255), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True)
    criado_por = Column(String(100), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)

    sessao = relationship("CashSession", back_populates="movimentos")
