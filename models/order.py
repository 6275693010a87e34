from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from config.database import Base


class Order(Base):
    """
    Pedido (cabeçalho). O total é calculado na criação e não muda depois,
    mesmo que o preço dos produtos seja alterado.
    """

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    numero = Column(Integer, nullable=False, index=True)
    total = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default="pendente")
    cliente = Column(String(200), nullable=True)
    criado_por = Column(String(100), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
    entregue_em = Column(DateTime, nullable=True)

    itens = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    """
    Itens do pedido (cópia do produto e do preço no momento da venda).
    """

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    nome_produto = Column(String(200), nullable=False)
    quantidade = Column(Integer, nullable=False, default=1)
    preco_unitario = Column(Float, nullable=False, default=0.0)
    subtotal = Column(Float, nullable=False, default=0.0)
    observacoes = Column(String(255), nullable=True)

    order = relationship("Order", back_populates="itens")
