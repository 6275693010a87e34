"""
Avaliações deixadas pelos clientes.
"""
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from config.database import Base


class Rating(Base):
    """
    Avaliação de um cliente. As notas ficam em `notas` ({categoria: nota}),
    pois o conjunto de categorias depende da configuração (RATING_CATEGORIES).
    """

    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(200), nullable=True)
    contato = Column(String(150), nullable=True)
    comentario = Column(Text, nullable=True)
    notas = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)

    def nota(self, categoria: str) -> float:
        return float((self.notas or {}).get(categoria) or 0)
