"""
Finalidade:
    Esquema do item de catálogo (CatalogItem), chave natural e
    normalização/validação dos campos.

Como funciona:
    - clean_text troca espaços especiais (NBSP, espaço fino, tabulação) por
      espaço comum e apara as bordas, para que espaços invisíveis não criem
      itens "diferentes" com a mesma descrição.
    - validate_fields exige descrição e fornecedor não vazios e preço finito
      e não negativo; a marca pode ser vazia ("sem marca").

Estilo:
    - Seções numeradas e comentários curtos.
"""

# 1. Importação
import datetime
import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .errors import ValidationError


# 2. Entidade
@dataclass
class CatalogItem:
    description: str
    brand: str
    vendor: str
    price: float
    updated_at: datetime.date
    id: Optional[int] = None

    @property
    def key(self) -> Tuple[str, str, str]:
        """Chave natural (descrição, marca, fornecedor), única no catálogo."""
        return (self.description, self.brand, self.vendor)

    @classmethod
    def from_row(cls, row) -> "CatalogItem":
        return cls(
            id=row["id"],
            description=row["description"],
            brand=row["brand"],
            vendor=row["vendor"],
            price=float(row["price"]),
            updated_at=parse_date(row["updated_at"]),
        )


# 3. Normalização
def clean_text(value: Any) -> str:
    if value is None:
        return ""
    s = str(value)
    s = s.replace("\u00A0", " ").replace("\u202F", " ").replace("\u2007", " ").replace("\t", " ")
    return s.strip()


def parse_date(value: Any) -> datetime.date:
    """Data ISO (YYYY-MM-DD) -> date. Levanta ValueError para texto inválido."""
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value).strip())


# 4. Validação
def validate_fields(description: Any, brand: Any, vendor: Any, price: Any) -> Tuple[str, str, str, float]:
    """Normaliza e valida os quatro campos editáveis.

    :return: (description, brand, vendor, price) prontos para gravação
    :raises ValidationError: campo obrigatório vazio ou preço inválido
    """
    description = clean_text(description)
    brand = clean_text(brand)
    vendor = clean_text(vendor)
    if not description:
        raise ValidationError("A descrição é obrigatória.")
    if not vendor:
        raise ValidationError("O fornecedor é obrigatório.")
    try:
        price = float(price)
    except (TypeError, ValueError):
        raise ValidationError("Preço inválido ou vazio") from None
    if not math.isfinite(price) or price < 0:
        raise ValidationError("O preço deve ser um número não negativo.")
    return description, brand, vendor, price
