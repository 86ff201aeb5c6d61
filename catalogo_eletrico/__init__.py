"""
Finalidade:
    Pacote do Catálogo Elétrico de Preços: armazenamento local (SQLite) dos
    itens de catálogo, importação/exportação CSV e busca em memória.

Como funciona:
    - Exporta as classes principais para uso pela camada de interface.

Estilo:
    - Seções numeradas e comentários curtos.
"""

# 1. Exportação das classes principais
from .db import DB  # noqa: F401
from .errors import Outcome, Status, ImportSummary, RowError  # noqa: F401
from .models import CatalogItem  # noqa: F401
from .store import CatalogStore  # noqa: F401
from .search import SearchIndex  # noqa: F401
from .session import CatalogSession, ViewMode  # noqa: F401

__version__ = "0.1.0"
