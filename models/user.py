from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from config.database import Base

ROLES = ("admin", "operador", "cozinheiro")


class User(Base):
    """
    Usuários do sistema PDV.
    Perfis suportados (role):
    - admin
    - operador
    - cozinheiro
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(150), unique=True, nullable=False, index=True)
    nome = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="operador")
    ativo = Column(Boolean, nullable=False, default=True)
    ultimo_acesso = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
