"""
Cadastro de clientes.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from models.customer import Customer
from services.errors import ValidationError
from services.store import DocumentStore


class CustomerService:
    @staticmethod
    def get_customers(db: Session, apenas_ativos: bool = False) -> List[Customer]:
        """Clientes, mais recentes primeiro."""
        clientes = DocumentStore(db).fetch_all("customers")
        if apenas_ativos:
            clientes = [c for c in clientes if c.ativo]
        return sorted(clientes, key=lambda c: (c.created_at, c.id), reverse=True)

    @staticmethod
    def create_customer(
        db: Session,
        nome: str,
        email: Optional[str] = None,
        telefone: Optional[str] = None,
    ) -> Customer:
        if not (nome or "").strip():
            raise ValidationError("Informe o nome do cliente.")
        return DocumentStore(db).create(
            "customers",
            nome=nome.strip(),
            email=(email or "").strip().lower() or None,
            telefone=(telefone or "").strip() or None,
            ativo=True,
            created_at=datetime.now(),
        )

    @staticmethod
    def update_customer(db: Session, customer_id: int, **dados) -> Customer:
        permitidos = {"nome", "email", "telefone"}
        if set(dados) - permitidos:
            raise ValidationError("Somente nome, e-mail e telefone podem ser alterados.")
        if "nome" in dados and not (dados["nome"] or "").strip():
            raise ValidationError("Informe o nome do cliente.")
        return DocumentStore(db).update("customers", customer_id, **dados)

    @staticmethod
    def set_active(db: Session, customer_id: int, ativo: bool) -> Customer:
        return DocumentStore(db).update("customers", customer_id, ativo=ativo)

    @staticmethod
    def get_customers_by_period(db: Session, inicio: datetime, fim: datetime) -> List[Customer]:
        return DocumentStore(db).fetch_range("customers", "created_at", inicio, fim)
