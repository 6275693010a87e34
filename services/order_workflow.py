"""
Fluxos de status dos pedidos.

Existem dois fluxos, exclusivos entre si, escolhidos por configuração
(ORDER_WORKFLOW):

- cozinha: pendente -> preparando -> pronto -> entregue
- conta:   pendente -> em haver -> pago
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from config import settings
from services.errors import InvalidTransitionError, PermissionDeniedError

TODOS_OS_PERFIS: FrozenSet[str] = frozenset({"admin", "operador", "cozinheiro"})


@dataclass(frozen=True)
class OrderWorkflow:
    nome: str
    statuses: Tuple[str, ...]
    # (de, para) -> perfis que podem fazer a mudança
    transicoes: Dict[Tuple[str, str], FrozenSet[str]]
    terminal: str
    status_cozinha: Tuple[str, ...] = field(default=())
    inicial: str = "pendente"

    def prioridade(self, status: str) -> int:
        """Ordem de exibição: status fora do fluxo vão para o fim."""
        try:
            return self.statuses.index(status)
        except ValueError:
            return 99

    def is_terminal(self, status: str) -> bool:
        return status == self.terminal

    def proximos(self, status: str) -> Tuple[str, ...]:
        return tuple(para for (de, para) in self.transicoes if de == status)

    def can_transition(self, atual: str, alvo: str, role: str) -> bool:
        perfis = self.transicoes.get((atual, alvo))
        return perfis is not None and role in perfis

    def check_transition(self, atual: str, alvo: str, role: str) -> None:
        """
        Lança InvalidTransitionError se a mudança não existe no fluxo e
        PermissionDeniedError se o perfil não pode fazê-la.
        """
        perfis = self.transicoes.get((atual, alvo))
        if perfis is None:
            raise InvalidTransitionError(
                f"Não é possível passar o pedido de '{atual}' para '{alvo}'."
            )
        if role not in perfis:
            raise PermissionDeniedError(
                f"O perfil '{role}' não pode mudar o pedido para '{alvo}'."
            )


KITCHEN_WORKFLOW = OrderWorkflow(
    nome="cozinha",
    statuses=("pendente", "preparando", "pronto", "entregue"),
    transicoes={
        ("pendente", "preparando"): frozenset({"cozinheiro", "admin"}),
        ("preparando", "pronto"): frozenset({"cozinheiro", "admin"}),
        ("pronto", "entregue"): frozenset({"operador", "admin"}),
    },
    terminal="entregue",
    status_cozinha=("pendente", "preparando", "pronto"),
)

ACCOUNT_WORKFLOW = OrderWorkflow(
    nome="conta",
    statuses=("pendente", "em haver", "pago"),
    transicoes={
        ("pendente", "em haver"): TODOS_OS_PERFIS,
        ("em haver", "pago"): TODOS_OS_PERFIS,
    },
    terminal="pago",
    status_cozinha=("pendente", "em haver"),
)

WORKFLOWS = {w.nome: w for w in (KITCHEN_WORKFLOW, ACCOUNT_WORKFLOW)}


def get_workflow(nome: Optional[str] = None) -> OrderWorkflow:
    """
    Fluxo configurado (ORDER_WORKFLOW) ou o fluxo pedido pelo nome.
    """
    nome = nome or settings.ORDER_WORKFLOW
    try:
        return WORKFLOWS[nome]
    except KeyError:
        raise ValueError(
            f"Fluxo de pedidos desconhecido: {nome!r} (use 'cozinha' ou 'conta')"
        ) from None
