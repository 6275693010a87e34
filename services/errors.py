"""
Erros de domínio do PDV.
Os serviços lançam estes erros sem tratá-los; quem chama decide a mensagem
exibida ao usuário.
"""


class PDVError(Exception):
    """Base para os erros do PDV."""


class ValidationError(PDVError):
    """Entrada inválida (campo obrigatório vazio, valor não positivo...)."""


class ConflictError(PDVError):
    """Regra de negócio violada (ex.: já existe caixa aberto)."""


class PermissionDeniedError(PDVError):
    """O perfil do usuário não permite a operação."""


class InvalidTransitionError(PDVError):
    """Mudança de status inexistente no fluxo do pedido."""


class NotFoundError(PDVError):
    """Registro referenciado não existe."""


class StoreError(PDVError):
    """Falha na chamada ao banco de dados."""


class AuthenticationError(PDVError):
    """Credenciais inválidas ou usuário inativo."""
