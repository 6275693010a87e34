"""
Serviço de autenticação e controle de acesso do PDV.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

import bcrypt
from sqlalchemy.orm import Session

from config import settings
from config.database import SessionLocal
from models.user import ROLES, User
from services.errors import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
    ValidationError,
)
from services.store import DocumentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserContext:
    """
    Usuário autenticado, passado explicitamente às operações que
    registram quem fez o quê.
    """

    id: int
    email: str
    nome: str
    role: str


class AuthService:
    """
    Gerencia autenticação e permissões básicas (roles).
    """

    @staticmethod
    def hash_password(password: str) -> str:
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))

    @staticmethod
    def create_user(
        db: Session,
        email: str,
        nome: str,
        password: str,
        role: str,
    ) -> User:
        email = (email or "").strip().lower()
        if not email or not (nome or "").strip() or not password:
            raise ValidationError("E-mail, nome e senha são obrigatórios.")
        if role not in ROLES:
            raise ValidationError(f"Perfil inválido: {role}")
        store = DocumentStore(db)
        if store.fetch_where("users", email=email):
            raise ConflictError(f"Já existe um usuário com o e-mail {email}.")
        return store.create(
            "users",
            email=email,
            nome=nome.strip(),
            password_hash=AuthService.hash_password(password),
            role=role,
            ativo=True,
        )

    @staticmethod
    def sign_in(db: Session, email: str, password: str) -> UserContext:
        """
        Valida e-mail/senha e devolve o contexto do usuário.
        Atualiza o último acesso.
        """
        store = DocumentStore(db)
        users = store.fetch_where("users", email=(email or "").strip().lower())
        user = users[0] if users else None
        if not user or not AuthService.verify_password(password, user.password_hash):
            raise AuthenticationError("E-mail ou senha inválidos.")
        if not user.ativo:
            raise AuthenticationError("Usuário não encontrado ou inativo.")

        store.update("users", user.id, ultimo_acesso=datetime.now())
        logger.info("Login de %s (%s)", user.email, user.role)
        return UserContext(id=user.id, email=user.email, nome=user.nome, role=user.role)

    @staticmethod
    def sign_out(user: Optional[UserContext]) -> None:
        # Não há estado no servidor; quem chama descarta o contexto.
        if user:
            logger.info("Logout de %s", user.email)

    # ----- Requisitos de acesso -----

    @staticmethod
    def has_role(user: Optional[UserContext], allowed_roles: Sequence[str]) -> bool:
        return bool(user) and user.role in allowed_roles

    @staticmethod
    def require_roles(user: Optional[UserContext], allowed_roles: Sequence[str]) -> None:
        """
        Garante que o usuário tenha um dos perfis permitidos.
        """
        if not AuthService.has_role(user, allowed_roles):
            raise PermissionDeniedError(
                "Você não tem permissão para acessar esta funcionalidade."
            )


def ensure_default_admin(db: Optional[Session] = None) -> None:
    """
    Garante a existência de um usuário admin padrão.
    Executado na inicialização da aplicação.
    """
    own_session = db is None
    if own_session:
        db = SessionLocal()
    try:
        admin = db.query(User).filter(User.role == "admin").first()
        if not admin:
            AuthService.create_user(
                db=db,
                email=settings.DEFAULT_ADMIN_EMAIL,
                nome="Administrador",
                password=settings.DEFAULT_ADMIN_PASSWORD,
                role="admin",
            )
            logger.warning(
                "Usuário admin criado: %s (altere a senha em produção)",
                settings.DEFAULT_ADMIN_EMAIL,
            )
    finally:
        if own_session:
            db.close()
