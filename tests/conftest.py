"""
Fixtures do pytest para os serviços do PDV.

Cada teste recebe um banco SQLite em memória novo.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.database import Base, init_db
from services.auth_service import UserContext
from services.stock_service import StockService


@pytest.fixture(scope="function")
def db():
    """Sessão em um banco novo para cada teste."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def admin():
    return UserContext(id=1, email="admin@cafe.local", nome="Administrador", role="admin")


@pytest.fixture
def operador():
    return UserContext(id=2, email="ana@cafe.local", nome="Ana", role="operador")


@pytest.fixture
def cozinheiro():
    return UserContext(id=3, email="bruno@cafe.local", nome="Bruno", role="cozinheiro")


@pytest.fixture
def cafe(db):
    return StockService.create_product(
        db, nome="Café Expresso", preco_venda=10.0, categoria="Bebidas",
        estoque_atual=20, estoque_minimo=5,
    )


@pytest.fixture
def pao_de_queijo(db):
    return StockService.create_product(
        db, nome="Pão de Queijo", preco_venda=5.0, categoria="Salgados",
        estoque_atual=10, estoque_minimo=2,
    )
