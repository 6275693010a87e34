from datetime import timedelta

import locale

# Tenta usar locale pt_BR para formatação monetária, se disponível
try:
    locale.setlocale(locale.LC_ALL, "pt_BR.UTF-8")
except locale.Error:
    # Em alguns ambientes Windows, o locale pode ter outro nome ou não estar disponível.
    pass


def format_currency(value: float) -> str:
    """
    Formata um número como moeda em reais.
    """
    try:
        return locale.currency(value, grouping=True)
    except ValueError:
        return f"R$ {value:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def format_duration(delta: timedelta) -> str:
    """
    Duração no formato "1h 5min" ou "12min".
    """
    minutos = max(0, int(delta.total_seconds() // 60))
    horas, resto = divmod(minutos, 60)
    if horas > 0:
        return f"{horas}h {resto}min"
    return f"{minutos}min"
