"""
Script para inicializar o banco de dados do PDV do café.
- Cria todas as tabelas
- Garante a existência de um usuário admin padrão
"""
from config import settings
from config.database import init_db
from services.auth_service import ensure_default_admin


def main() -> None:
    settings.configure_logging()
    print("📦 Inicializando banco de dados do PDV...")
    init_db()
    print("✅ Tabelas criadas (se não existiam).")

    ensure_default_admin()
    print(f"✅ Usuário admin garantido ({settings.DEFAULT_ADMIN_EMAIL}).")


if __name__ == "__main__":
    main()
