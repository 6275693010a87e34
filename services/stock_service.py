"""
Serviço de estoque: cadastro de produtos e quantidades.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from models.product import Product
from services.errors import NotFoundError, ValidationError
from services.store import DocumentStore

logger = logging.getLogger(__name__)

CAMPOS_EDITAVEIS = (
    "nome",
    "categoria",
    "preco_venda",
    "estoque_atual",
    "estoque_minimo",
    "unidade",
    "ativo",
)


def _validate(dados: dict) -> None:
    if "nome" in dados and not (dados["nome"] or "").strip():
        raise ValidationError("Informe o nome do produto.")
    for campo in ("preco_venda", "estoque_atual", "estoque_minimo"):
        if campo in dados and (dados[campo] is None or dados[campo] < 0):
            raise ValidationError(f"O campo {campo} não pode ser negativo.")


class StockService:
    @staticmethod
    def get_products(db: Session) -> List[Product]:
        """Produtos ativos em ordem alfabética."""
        produtos = DocumentStore(db).fetch_all("products")
        return sorted((p for p in produtos if p.ativo), key=lambda p: p.nome.lower())

    @staticmethod
    def get_product(db: Session, product_id: int) -> Product:
        product = DocumentStore(db).fetch_by_id("products", product_id)
        if product is None:
            raise NotFoundError(f"Produto {product_id} não encontrado.")
        return product

    @staticmethod
    def create_product(
        db: Session,
        nome: str,
        preco_venda: float,
        categoria: str | None = None,
        estoque_atual: float = 0.0,
        estoque_minimo: float = 0.0,
        unidade: str = "un",
    ) -> Product:
        dados = dict(
            nome=nome,
            categoria=categoria,
            preco_venda=preco_venda,
            estoque_atual=estoque_atual,
            estoque_minimo=estoque_minimo,
            unidade=unidade or "un",
        )
        _validate(dados)
        dados["nome"] = nome.strip()
        product = DocumentStore(db).create("products", ativo=True, **dados)
        logger.info("Produto %s cadastrado: %s", product.id, product.nome)
        return product

    @staticmethod
    def update_product(db: Session, product_id: int, **dados) -> Product:
        """
        Atualiza campos do produto. Pedidos já feitos não são afetados,
        pois guardam o preço do momento da venda.
        """
        desconhecidos = set(dados) - set(CAMPOS_EDITAVEIS)
        if desconhecidos:
            raise ValidationError(f"Campos não editáveis: {', '.join(sorted(desconhecidos))}")
        _validate(dados)
        return DocumentStore(db).update("products", product_id, **dados)

    @staticmethod
    def remove_product(db: Session, product_id: int) -> Product:
        """Remoção lógica: o produto some das listas, mas fica no histórico."""
        product = DocumentStore(db).update("products", product_id, ativo=False)
        logger.info("Produto %s desativado", product_id)
        return product

    @staticmethod
    def adjust_stock(
        db: Session, product_id: int, quantidade: float, absoluto: bool = False
    ) -> Product:
        """
        Soma `quantidade` ao estoque (nunca abaixo de zero) ou, com
        absoluto=True, define o estoque para `quantidade`.
        """
        store = DocumentStore(db)
        if absoluto:
            if quantidade < 0:
                raise ValidationError("O estoque não pode ser negativo.")
            return store.update("products", product_id, estoque_atual=float(quantidade))
        store.increment("products", product_id, "estoque_atual", quantidade, floor=0)
        return StockService.get_product(db, product_id)

    @staticmethod
    def get_low_stock(db: Session) -> List[Product]:
        return [p for p in StockService.get_products(db) if p.estoque_baixo]
