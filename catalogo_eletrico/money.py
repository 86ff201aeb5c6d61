"""
Finalidade:
    Conversão entre texto de preço (formato brasileiro, vírgula decimal) e
    valor numérico, nos dois sentidos.

Como funciona:
    - parse_price aceita "1234.50", "1234,50", "1.234,50" e "R$ 1.234,50".
      Havendo vírgula, ela é o separador decimal e os pontos são separadores
      de milhar; sem vírgula, o ponto é o decimal.
    - format_price gera o formato de exibição com agrupamento de milhar pelo
      QLocale configurado ("1.234,50" em pt_BR).
    - format_price_csv gera o formato do arquivo CSV: vírgula decimal, sem
      agrupamento ("1234,50").

Estilo:
    - Seções numeradas e comentários curtos.
"""

# 1. Importação
import math
import re
from typing import Any, Optional

from PySide6 import QtCore

from .errors import InvalidFormat

# 2. Constantes
# Meio centavo: tolera a perda de arredondamento do formato de duas casas
PRICE_EPSILON = 0.005
DEFAULT_LOCALE = "pt_BR"

_NUMBER_RE = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")
# com vírgula decimal: pontos só como separador de milhar, antes da vírgula
_COMMA_NUMBER_RE = re.compile(r"^(?:\d{1,3}(?:\.\d{3})+|\d*),\d*$")
_SPACES = ("\u00A0", "\u202F", "\u2007", "\t", " ")

_display_locale = QtCore.QLocale(DEFAULT_LOCALE)


def set_display_locale(name: str) -> None:
    """Define o locale usado por format_price (ex.: "pt_BR", "de_DE")."""
    global _display_locale
    _display_locale = QtCore.QLocale(name or DEFAULT_LOCALE)


# 3. Texto -> número
def parse_price(text: Any) -> float:
    """Converte o texto digitado/lido em preço.

    :param text: texto com ponto ou vírgula decimal
    :return: preço (float, não negativo)
    :raises InvalidFormat: texto vazio, não numérico ou negativo
    """
    s = "" if text is None else str(text)
    for ch in _SPACES:
        s = s.replace(ch, "")
    if s.upper().startswith("R$"):
        s = s[2:]
    if not s:
        raise InvalidFormat("Preço inválido ou vazio")
    if "," in s:
        if not _COMMA_NUMBER_RE.match(s) or not any(ch.isdigit() for ch in s):
            raise InvalidFormat(f"Preço inválido: '{text}'")
        s = s.replace(".", "").replace(",", ".")
    if not _NUMBER_RE.match(s):
        raise InvalidFormat(f"Preço inválido: '{text}'")
    value = float(s)
    if not math.isfinite(value):
        raise InvalidFormat(f"Preço inválido: '{text}'")
    return value


# 4. Número -> texto
def format_price(price: float, locale: Optional[QtCore.QLocale] = None) -> str:
    """Formato de exibição: duas casas, vírgula decimal, milhar agrupado."""
    loc = locale if locale is not None else _display_locale
    return loc.toString(float(price), "f", 2)


def format_price_csv(price: float) -> str:
    return f"{float(price):.2f}".replace(".", ",")


def prices_equal(a: float, b: float) -> bool:
    return abs(float(a) - float(b)) < PRICE_EPSILON


def format_price_input(price: float) -> str:
    """Formato de exibição sem separador de milhar, para campos de edição ("1234,50")."""
    loc = QtCore.QLocale(_display_locale)
    loc.setNumberOptions(QtCore.QLocale.NumberOption.OmitGroupSeparator)
    return format_price(price, loc)
