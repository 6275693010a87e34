from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String

from config.database import Base


class Product(Base):
    """
    Produtos do cardápio/estoque do café.
    Produtos removidos ficam com ativo=False para manter o histórico.
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(200), nullable=False)
    categoria = Column(String(100), nullable=True)
    preco_venda = Column(Float, nullable=False, default=0.0)
    estoque_atual = Column(Float, nullable=False, default=0.0)
    estoque_minimo = Column(Float, nullable=False, default=0.0)
    unidade = Column(String(20), nullable=False, default="un")
    ativo = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.now, onupdate=datetime.now
    )

    @property
    def estoque_baixo(self) -> bool:
        return self.estoque_atual <= self.estoque_minimo
