"""
Seed do cardápio do café para testes do PDV.
Pode ser executado em ambiente local ou de produção (cuidado ao rodar em produção).
"""
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from config import settings
from config.database import SessionLocal, init_db
from models.product import Product
from services.stock_service import StockService


PRODUTOS = [
    # Bebidas quentes
    dict(nome="Café Expresso", categoria="Bebidas quentes", preco_venda=6.0,
         estoque_atual=200, estoque_minimo=30, unidade="un"),
    dict(nome="Cappuccino", categoria="Bebidas quentes", preco_venda=9.5,
         estoque_atual=120, estoque_minimo=20, unidade="un"),
    dict(nome="Chocolate Quente", categoria="Bebidas quentes", preco_venda=10.0,
         estoque_atual=80, estoque_minimo=15, unidade="un"),
    # Bebidas frias
    dict(nome="Suco de Laranja", categoria="Bebidas frias", preco_venda=8.0,
         estoque_atual=60, estoque_minimo=10, unidade="copo"),
    dict(nome="Água Mineral", categoria="Bebidas frias", preco_venda=4.0,
         estoque_atual=100, estoque_minimo=24, unidade="garrafa"),
    # Salgados
    dict(nome="Pão de Queijo", categoria="Salgados", preco_venda=5.0,
         estoque_atual=150, estoque_minimo=40, unidade="un"),
    dict(nome="Misto Quente", categoria="Salgados", preco_venda=12.0,
         estoque_atual=50, estoque_minimo=10, unidade="un"),
    dict(nome="Coxinha", categoria="Salgados", preco_venda=7.5,
         estoque_atual=70, estoque_minimo=15, unidade="un"),
    # Doces
    dict(nome="Bolo de Cenoura", categoria="Doces", preco_venda=8.5,
         estoque_atual=24, estoque_minimo=6, unidade="fatia"),
    dict(nome="Brigadeiro", categoria="Doces", preco_venda=3.5,
         estoque_atual=90, estoque_minimo=20, unidade="un"),
]


def main() -> None:
    settings.configure_logging()
    init_db()
    db = SessionLocal()
    try:
        existentes = {p.nome for p in db.query(Product).all()}
        criados = 0
        for dados in PRODUTOS:
            if dados["nome"] in existentes:
                continue
            StockService.create_product(db, **dados)
            criados += 1
        print(f"✅ {criados} produtos criados ({len(existentes)} já existiam).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
