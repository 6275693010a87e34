"""
Configurações gerais do PDV do café.
- Lê variáveis do arquivo .env na raiz do projeto (python-dotenv)
- Define o fluxo de status dos pedidos e as categorias de avaliação
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent
env_path = PROJECT_ROOT / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

# Diretório de dados locais (SQLite e backups)
DATA_DIR = PROJECT_ROOT / "data"

# Fluxo de pedidos: "cozinha" (pendente/preparando/pronto/entregue)
# ou "conta" (pendente/em haver/pago)
ORDER_WORKFLOW = os.getenv("ORDER_WORKFLOW", "cozinha")

# Categorias de avaliação: "cinco" ou "quatro"
RATING_CATEGORIES = os.getenv("RATING_CATEGORIES", "cinco")

# Diferença mínima (em reais) para considerar que houve quebra de caixa
VARIANCE_TOLERANCE = float(os.getenv("VARIANCE_TOLERANCE", "0.01"))

DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@cafe.local")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: str | None = None) -> None:
    """
    Configura o logging da aplicação (nível vindo de LOG_LEVEL).
    """
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
