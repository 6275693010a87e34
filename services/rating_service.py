"""
Avaliações dos clientes e suas estatísticas.

Há dois conjuntos de categorias em uso (RATING_CATEGORIES):
- cinco: atendimento, preços, qualidade dos produtos, ambiente, tempo de preparo
- quatro: atendimento, produtos, ambiente, rapidez
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from config import settings
from models.rating import Rating
from services.errors import ValidationError
from services.store import DocumentStore

CATEGORIAS_AVALIACAO: Dict[str, Tuple[str, ...]] = {
    "cinco": (
        "atendimento",
        "precos_produtos",
        "qualidade_produtos",
        "ambiente",
        "tempo_preparo",
    ),
    "quatro": ("atendimento", "produtos", "ambiente", "rapidez"),
}

NOTA_MINIMA = 0
NOTA_MAXIMA = 5


def get_categories(variante: Optional[str] = None) -> Tuple[str, ...]:
    variante = variante or settings.RATING_CATEGORIES
    try:
        return CATEGORIAS_AVALIACAO[variante]
    except KeyError:
        raise ValueError(
            f"Conjunto de categorias desconhecido: {variante!r} (use 'cinco' ou 'quatro')"
        ) from None


def compute_statistics(avaliacoes: List[Rating], variante: Optional[str] = None) -> dict:
    """
    Total, média geral e média por categoria.
    A média geral é a média das médias por categoria.
    """
    categorias = get_categories(variante)
    if not avaliacoes:
        return {
            "total": 0,
            "media_geral": 0.0,
            "por_categoria": {c: 0.0 for c in categorias},
        }

    por_categoria = {
        c: sum(av.nota(c) for av in avaliacoes) / len(avaliacoes) for c in categorias
    }
    return {
        "total": len(avaliacoes),
        "media_geral": sum(por_categoria.values()) / len(categorias),
        "por_categoria": por_categoria,
    }


class RatingService:
    @staticmethod
    def create_rating(
        db: Session,
        notas: Dict[str, float],
        nome: Optional[str] = None,
        contato: Optional[str] = None,
        comentario: Optional[str] = None,
        variante: Optional[str] = None,
    ) -> Rating:
        categorias = get_categories(variante)
        faltando = [c for c in categorias if c not in notas]
        if faltando:
            raise ValidationError(f"Notas faltando: {', '.join(faltando)}")
        extras = set(notas) - set(categorias)
        if extras:
            raise ValidationError(f"Categorias desconhecidas: {', '.join(sorted(extras))}")
        for categoria, nota in notas.items():
            if nota is None or not NOTA_MINIMA <= nota <= NOTA_MAXIMA:
                raise ValidationError(
                    f"A nota de {categoria} deve estar entre {NOTA_MINIMA} e {NOTA_MAXIMA}."
                )

        return DocumentStore(db).create(
            "ratings",
            nome=(nome or "").strip(),
            contato=(contato or "").strip(),
            comentario=(comentario or "").strip(),
            notas=dict(notas),
            created_at=datetime.now(),
        )

    @staticmethod
    def get_ratings(db: Session) -> List[Rating]:
        """Avaliações, mais recentes primeiro."""
        avaliacoes = DocumentStore(db).fetch_all("ratings")
        return sorted(avaliacoes, key=lambda a: (a.created_at, a.id), reverse=True)

    @staticmethod
    def get_ratings_by_period(db: Session, inicio: datetime, fim: datetime) -> List[Rating]:
        return DocumentStore(db).fetch_range("ratings", "created_at", inicio, fim)

    @staticmethod
    def get_statistics(db: Session, variante: Optional[str] = None) -> dict:
        return compute_statistics(RatingService.get_ratings(db), variante)
