"""
Finalidade:
    Taxonomia de erros do catálogo e valores de resultado (Outcome) exibíveis
    diretamente ao usuário.

Como funciona:
    - CatalogError é a base de todas as exceções de domínio; cada subclasse
      carrega um Status e uma mensagem em português.
    - As camadas internas (db/store/csv_transfer) levantam exceções; as
      operações públicas convertem tudo em Outcome com Outcome.from_error().
    - RowError não é exceção: é um valor acumulado no ImportSummary, pois uma
      linha inválida do CSV nunca aborta a importação.

Estilo:
    - Seções numeradas e comentários curtos.
"""

# 1. Importação
import enum
from dataclasses import dataclass, field
from typing import List


# 2. Status dos resultados
class Status(enum.Enum):
    OK = "ok"
    NO_CHANGE = "no_change"
    NOT_FOUND = "not_found"
    VALIDATION_ERROR = "validation_error"
    STORAGE_ERROR = "storage_error"
    TRANSFER_FATAL = "transfer_fatal"


# 3. Exceções de domínio
class CatalogError(Exception):
    """Base das exceções do catálogo.

    :param message: mensagem legível para o usuário
    """
    status = Status.STORAGE_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(CatalogError):
    """Entrada ausente ou inválida antes de chegar ao armazenamento."""
    status = Status.VALIDATION_ERROR


class InvalidFormat(ValidationError):
    """Texto de preço vazio ou não numérico."""


class NotFound(CatalogError):
    status = Status.NOT_FOUND


class NoChange(CatalogError):
    status = Status.NO_CHANGE


class StorageError(CatalogError):
    status = Status.STORAGE_ERROR


class TransferFatalError(CatalogError):
    """Falha ao abrir o arquivo ou ao confirmar a transação: aborta o CSV inteiro."""
    status = Status.TRANSFER_FATAL


# 4. Valores de resultado
@dataclass
class Outcome:
    status: Status
    message: str

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    @classmethod
    def success(cls, message: str) -> "Outcome":
        return cls(Status.OK, message)

    @classmethod
    def from_error(cls, error: CatalogError) -> "Outcome":
        return cls(error.status, error.message)

    def __str__(self) -> str:
        return self.message


@dataclass
class RowError:
    """Linha do CSV ignorada.

    row_number conta apenas as linhas de dados (cabeçalho excluído), a partir de 1;
    raw_value é o texto exatamente como lido do arquivo.
    """
    row_number: int
    raw_value: str
    reason: str

    def __str__(self) -> str:
        return f"linha {self.row_number}: {self.reason} ('{self.raw_value}')"


@dataclass
class ImportSummary(Outcome):
    imported: int = 0
    row_errors: List[RowError] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.row_errors)
