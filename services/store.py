"""
Acesso às coleções do PDV por nome.

Cada coleção é um mapeamento id -> registro, com as operações:
buscar tudo, buscar por id, criar (id gerado), atualizar campos por id e
buscar por intervalo de um campo de data. Cada escrita é confirmada
isoladamente (não há transação entre documentos).
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import case
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.cash_movement import CashMovement
from models.cash_session import CashSession
from models.customer import Customer
from models.order import Order
from models.product import Product
from models.rating import Rating
from models.user import User
from services.errors import NotFoundError, StoreError

logger = logging.getLogger(__name__)

COLLECTIONS: Dict[str, Type] = {
    "products": Product,
    "orders": Order,
    "sessions": CashSession,
    "movements": CashMovement,
    "customers": Customer,
    "ratings": Rating,
    "users": User,
}


class DocumentStore:
    """
    Envolve uma sessão SQLAlchemy e expõe as coleções por nome.
    Erros do SQLAlchemy viram StoreError.
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def model_for(collection: str) -> Type:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise StoreError(f"Coleção desconhecida: {collection}") from None

    def fetch_all(self, collection: str) -> List[Any]:
        model = self.model_for(collection)
        try:
            return self.db.query(model).order_by(model.id).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Falha ao buscar {collection}: {exc}") from exc

    def fetch_by_id(self, collection: str, doc_id: int) -> Optional[Any]:
        model = self.model_for(collection)
        try:
            return self.db.get(model, doc_id)
        except SQLAlchemyError as exc:
            raise StoreError(f"Falha ao buscar {collection}/{doc_id}: {exc}") from exc

    def fetch_where(self, collection: str, **filters) -> List[Any]:
        model = self.model_for(collection)
        try:
            return self.db.query(model).filter_by(**filters).order_by(model.id).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Falha ao consultar {collection}: {exc}") from exc

    def fetch_range(
        self, collection: str, field: str, inicio: datetime, fim: datetime
    ) -> List[Any]:
        """
        Registros cujo `field` está entre inicio e fim (inclusive).
        """
        model = self.model_for(collection)
        column = getattr(model, field)
        try:
            return (
                self.db.query(model)
                .filter(column >= inicio, column <= fim)
                .order_by(column)
                .all()
            )
        except SQLAlchemyError as exc:
            raise StoreError(f"Falha ao buscar {collection} por período: {exc}") from exc

    def create(self, collection: str, **fields) -> Any:
        model = self.model_for(collection)
        return self.add(model(**fields), collection)

    def add(self, obj: Any, collection: str = "") -> Any:
        """
        Persiste um objeto já montado (ex.: pedido com seus itens).
        """
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Falha ao gravar {collection or type(obj).__name__}: {exc}") from exc
        logger.debug("Criado %s/%s", collection or type(obj).__name__, obj.id)
        return obj

    def update(self, collection: str, doc_id: int, **fields) -> Any:
        obj = self.fetch_by_id(collection, doc_id)
        if obj is None:
            raise NotFoundError(f"{collection}/{doc_id} não encontrado")
        for key, value in fields.items():
            setattr(obj, key, value)
        try:
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Falha ao atualizar {collection}/{doc_id}: {exc}") from exc
        return obj

    def increment(
        self,
        collection: str,
        doc_id: int,
        field: str,
        delta: float,
        floor: Optional[float] = None,
    ) -> None:
        """
        Soma `delta` ao campo num único UPDATE (sem ler antes),
        opcionalmente limitando o resultado a `floor`.
        """
        model = self.model_for(collection)
        column = getattr(model, field)
        novo_valor = column + delta
        if floor is not None:
            novo_valor = case((novo_valor < floor, floor), else_=novo_valor)
        try:
            updated = (
                self.db.query(model)
                .filter(model.id == doc_id)
                .update({column: novo_valor}, synchronize_session="fetch")
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Falha ao atualizar {collection}/{doc_id}: {exc}") from exc
        if not updated:
            raise NotFoundError(f"{collection}/{doc_id} não encontrado")
