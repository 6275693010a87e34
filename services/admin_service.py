"""
Administração: usuários do sistema e exportação dos dados.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from config.settings import DATA_DIR
from models.user import ROLES, User
from services.auth_service import AuthService, UserContext
from services.errors import ValidationError
from services.store import COLLECTIONS, DocumentStore

logger = logging.getLogger(__name__)

# Nunca exportados
CAMPOS_SENSIVEIS = {"password_hash"}


def to_dict(obj: Any) -> Dict[str, Any]:
    """Colunas de um registro ORM como dicionário."""
    return {
        attr.key: getattr(obj, attr.key)
        for attr in inspect(obj).mapper.column_attrs
        if attr.key not in CAMPOS_SENSIVEIS
    }


class AdminService:
    @staticmethod
    def get_users(db: Session) -> List[User]:
        return DocumentStore(db).fetch_all("users")

    @staticmethod
    def create_user(
        db: Session, actor: UserContext, email: str, nome: str, role: str, senha: str
    ) -> User:
        AuthService.require_roles(actor, ["admin"])
        user = AuthService.create_user(db, email=email, nome=nome, password=senha, role=role)
        logger.info("Usuário %s (%s) criado por %s", user.email, user.role, actor.email)
        return user

    @staticmethod
    def update_user(
        db: Session,
        actor: UserContext,
        user_id: int,
        nome: Optional[str] = None,
        role: Optional[str] = None,
        senha: Optional[str] = None,
    ) -> User:
        AuthService.require_roles(actor, ["admin"])
        campos: Dict[str, Any] = {}
        if nome is not None:
            if not nome.strip():
                raise ValidationError("O nome não pode ficar vazio.")
            campos["nome"] = nome.strip()
        if role is not None:
            if role not in ROLES:
                raise ValidationError(f"Perfil inválido: {role}")
            campos["role"] = role
        if senha:
            campos["password_hash"] = AuthService.hash_password(senha)
        return DocumentStore(db).update("users", user_id, **campos)

    @staticmethod
    def set_user_active(db: Session, actor: UserContext, user_id: int, ativo: bool) -> User:
        AuthService.require_roles(actor, ["admin"])
        if user_id == actor.id and not ativo:
            raise ValidationError("Você não pode desativar o próprio usuário.")
        return DocumentStore(db).update("users", user_id, ativo=ativo)

    @staticmethod
    def remove_user(db: Session, actor: UserContext, user_id: int) -> User:
        """Usuários não são apagados, apenas desativados."""
        return AdminService.set_user_active(db, actor, user_id, False)

    @staticmethod
    def export_data(db: Session) -> Dict[str, List[Dict[str, Any]]]:
        store = DocumentStore(db)
        return {
            nome: [to_dict(obj) for obj in store.fetch_all(nome)]
            for nome in COLLECTIONS
        }

    @staticmethod
    def create_backup(
        db: Session, actor: UserContext, destino: Optional[Path] = None
    ) -> Path:
        """
        Grava todas as coleções em JSON (data/backups/backup_AAAAMMDD_HHMMSS.json).
        """
        AuthService.require_roles(actor, ["admin"])
        destino = destino or DATA_DIR / "backups"
        destino.mkdir(parents=True, exist_ok=True)
        agora = datetime.now()
        arquivo = destino / f"backup_{agora:%Y%m%d_%H%M%S}.json"
        payload = {
            "created_at": agora.isoformat(),
            "created_by": actor.email,
            "dados": AdminService.export_data(db),
        }
        arquivo.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, default=str),
            encoding="utf-8",
        )
        logger.info("Backup gravado em %s por %s", arquivo, actor.email)
        return arquivo
