from datetime import date, datetime, time
from typing import Optional

from dateutil.relativedelta import relativedelta

TIPOS_PERIODO = ("Diário", "Semanal", "Mensal", "Geral")


def get_period(tipo: str, hoje: Optional[date] = None) -> tuple[date, date]:
    """
    Diário = hoje; Semanal = últimos 7 dias; Mensal = mês atual; Geral = tudo.
    """
    hoje = hoje or date.today()
    if tipo == "Diário":
        return hoje, hoje
    if tipo == "Semanal":
        return hoje - relativedelta(days=6), hoje
    if tipo == "Mensal":
        return hoje.replace(day=1), hoje
    if tipo == "Geral":
        return date(2000, 1, 1), hoje
    raise ValueError(f"Período desconhecido: {tipo}")


def day_bounds(inicio: date, fim: date) -> tuple[datetime, datetime]:
    """Do primeiro instante de `inicio` ao último de `fim`."""
    return datetime.combine(inicio, time.min), datetime.combine(fim, time.max)
