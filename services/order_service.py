"""
Pedidos: carrinho em memória, finalização, mudança de status e listagem.

A finalização grava o pedido e depois baixa o estoque item a item, sem
transação entre eles: se uma baixa falhar, o pedido continua gravado e o
estoque fica parcialmente baixado. O erro é repassado a quem chamou.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from models.order import Order, OrderItem
from services.auth_service import AuthService, UserContext
from services.cash_service import CashService
from services.errors import ConflictError, NotFoundError, ValidationError
from services.order_workflow import OrderWorkflow, get_workflow
from services.store import DocumentStore
from utils.formatters import format_currency, format_duration

logger = logging.getLogger(__name__)

PERFIS_QUE_CRIAM_PEDIDO = ("admin", "operador")


@dataclass
class CartItem:
    product_id: int
    nome: str
    preco_unitario: float
    quantidade: int = 1
    observacoes: Optional[str] = None

    @property
    def subtotal(self) -> float:
        return round(self.preco_unitario * self.quantidade, 2)


@dataclass
class Cart:
    itens: List[CartItem] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.itens)

    def is_empty(self) -> bool:
        return not self.itens

    def total(self) -> float:
        return round(sum(item.subtotal for item in self.itens), 2)

    def clear(self) -> None:
        self.itens.clear()


def add_line_item(cart: Cart, product, observacoes: Optional[str] = None) -> Cart:
    """
    Adiciona o produto ao carrinho: se já existe, soma 1 à quantidade.
    """
    for item in cart.itens:
        if item.product_id == product.id:
            item.quantidade += 1
            return cart
    cart.itens.append(
        CartItem(
            product_id=product.id,
            nome=product.nome,
            preco_unitario=product.preco_venda,
            observacoes=observacoes,
        )
    )
    return cart


def remove_line_item(cart: Cart, product_id: int) -> Cart:
    """Remove a linha inteira do produto (não decrementa)."""
    cart.itens = [item for item in cart.itens if item.product_id != product_id]
    return cart


def orders_for_view(
    orders: Iterable[Order],
    role: Optional[str],
    workflow: Optional[OrderWorkflow] = None,
    now: Optional[datetime] = None,
) -> List[Order]:
    """
    Pedidos de hoje e os de ontem ainda não finalizados.

    Visão geral: status em aberto primeiro (na ordem do fluxo), finalizados por
    último, mais recentes primeiro dentro do mesmo status.
    Cozinha: apenas status da cozinha, mais antigos primeiro.
    """
    workflow = workflow or get_workflow()
    now = now or datetime.now()
    inicio_hoje = now.replace(hour=0, minute=0, second=0, microsecond=0)
    inicio_ontem = inicio_hoje - timedelta(days=1)

    relevantes = [
        o
        for o in orders
        if o.created_at >= inicio_hoje
        or (o.created_at >= inicio_ontem and not workflow.is_terminal(o.status))
    ]

    if role == "cozinheiro":
        cozinha = [o for o in relevantes if o.status in workflow.status_cozinha]
        return sorted(cozinha, key=lambda o: (o.created_at, o.id))

    por_data = sorted(relevantes, key=lambda o: (o.created_at, o.id), reverse=True)
    return sorted(por_data, key=lambda o: workflow.prioridade(o.status))


def elapsed_time(order: Order, now: Optional[datetime] = None) -> str:
    """Tempo desde a criação até a entrega (ou até agora)."""
    fim = order.entregue_em or now or datetime.now()
    return format_duration(fim - order.created_at)


class OrderService:
    @staticmethod
    def get_orders(db: Session) -> List[Order]:
        """Todos os pedidos, mais recentes primeiro."""
        orders = DocumentStore(db).fetch_all("orders")
        return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)

    @staticmethod
    def get_order(db: Session, order_id: int) -> Order:
        order = DocumentStore(db).fetch_by_id("orders", order_id)
        if order is None:
            raise NotFoundError(f"Pedido {order_id} não encontrado.")
        return order

    @staticmethod
    def get_orders_by_period(db: Session, inicio: datetime, fim: datetime) -> List[Order]:
        return DocumentStore(db).fetch_range("orders", "created_at", inicio, fim)

    @staticmethod
    def next_number(db: Session) -> int:
        numeros = [o.numero for o in DocumentStore(db).fetch_all("orders")]
        return max(numeros, default=0) + 1

    @staticmethod
    def finalize_order(
        db: Session,
        cart: Cart,
        actor: UserContext,
        cliente: Optional[str] = None,
        workflow: Optional[OrderWorkflow] = None,
    ) -> Order:
        """
        Grava o pedido com o preço atual de cada produto e baixa o estoque.
        """
        if cart.is_empty():
            raise ValidationError("Adicione pelo menos um item ao pedido.")
        AuthService.require_roles(actor, PERFIS_QUE_CRIAM_PEDIDO)
        workflow = workflow or get_workflow()
        store = DocumentStore(db)

        itens = []
        for item in cart.itens:
            if item.quantidade < 1:
                raise ValidationError(f"Quantidade inválida para {item.nome}.")
            product = store.fetch_by_id("products", item.product_id)
            if product is None:
                raise NotFoundError(f"Produto {item.product_id} não encontrado.")
            if not product.ativo:
                raise ValidationError(f"O produto {product.nome} não está mais disponível.")
            itens.append(
                OrderItem(
                    product_id=product.id,
                    nome_produto=product.nome,
                    quantidade=item.quantidade,
                    preco_unitario=product.preco_venda,
                    subtotal=round(product.preco_venda * item.quantidade, 2),
                    observacoes=item.observacoes,
                )
            )

        order = Order(
            numero=OrderService.next_number(db),
            total=round(sum(i.subtotal for i in itens), 2),
            status=workflow.inicial,
            cliente=(cliente or "").strip() or None,
            criado_por=actor.email,
            created_at=datetime.now(),
            itens=itens,
        )
        store.add(order, "orders")
        logger.info(
            "Pedido #%s criado por %s: %s",
            order.numero,
            actor.email,
            format_currency(order.total),
        )

        for item in order.itens:
            store.increment(
                "products", item.product_id, "estoque_atual", -item.quantidade, floor=0
            )
        return order

    @staticmethod
    def transition(
        db: Session,
        order_id: int,
        novo_status: str,
        actor: UserContext,
        workflow: Optional[OrderWorkflow] = None,
    ) -> Order:
        workflow = workflow or get_workflow()
        order = OrderService.get_order(db, order_id)
        workflow.check_transition(order.status, novo_status, actor.role)

        campos = {"status": novo_status}
        if workflow.is_terminal(novo_status):
            campos["entregue_em"] = datetime.now()
        order = DocumentStore(db).update("orders", order_id, **campos)
        logger.info(
            "Pedido #%s: status '%s' por %s", order.numero, novo_status, actor.email
        )
        return order

    @staticmethod
    def record_payment(db: Session, order_id: int, actor: UserContext):
        """
        Lança o valor do pedido como entrada (venda) no caixa aberto.
        """
        order = OrderService.get_order(db, order_id)
        if order.total <= 0:
            raise ValidationError(
                f"O pedido #{order.numero} não tem valor a receber."
            )
        session = CashService.get_current_session(db)
        if session is None:
            raise ConflictError("Não há caixa aberto para registrar o pagamento.")
        if DocumentStore(db).fetch_where("movements", order_id=order_id):
            raise ConflictError(f"O pagamento do pedido #{order.numero} já foi registrado.")
        return CashService.record_movement(
            db,
            session.id,
            tipo="entrada",
            categoria="venda",
            valor=order.total,
            descricao=f"Pedido #{order.numero}" + (f" - {order.cliente}" if order.cliente else ""),
            actor=actor,
            order_id=order.id,
        )
