"""
Finalidade:
    Importação e exportação em massa do catálogo em CSV (separador ";").

Princípio de funcionamento:
    Importação (import_csv):
        1) Abre o arquivo em UTF-8 (BOM opcional) e ignora a linha de cabeçalho
           sem validá-la.
        2) Cada linha de dados é lida por posição: descrição, marca,
           fornecedor, preço, última atualização.
        3) Textos são aparados; o preço passa por parse_price (vírgula -> ponto).
           Linha com preço inválido (ou descrição/fornecedor vazios) é pulada e
           registrada como RowError com o número da linha de dados (1 = primeira
           linha após o cabeçalho) e o texto original.
        4) Todas as linhas válidas são gravadas numa única transação com a
           mesma semântica de upsert da loja. Falha na abertura do arquivo ou
           no commit aborta tudo (TRANSFER_FATAL) e nada é gravado.
        5) Após o commit o conjunto carregado da loja é recarregado; se só a
           releitura falhar, o resumo continua OK e a mensagem avisa.
    Exportação (export_csv):
        - Grava o conjunto carregado da loja (não o subconjunto visível da
          busca), na ordem em memória, em UTF-8 com BOM, preço com vírgula
          decimal e sem separador de milhar.

Estilo:
    - Seções numeradas e comentários curtos.
"""

# 1. Importação das bibliotecas
import csv
import logging
from pathlib import Path
from typing import Dict, List, Tuple, Union

from .errors import (CatalogError, ImportSummary, InvalidFormat, Outcome,
                     RowError, Status, TransferFatalError)
from .models import clean_text, parse_date
from .money import format_price_csv, parse_price
from .store import CatalogStore

logger = logging.getLogger(__name__)

# 2. Formato do arquivo
DELIMITER = ";"
EXPORT_HEADER = ["descrição", "marca", "fornecedor", "preço", "última atualização"]


def _cell(row: List[str], index: int) -> str:
    return row[index] if index < len(row) else ""


# 3. Leitura e análise das linhas
def read_rows(path: Union[Path, str], today: str) -> Tuple[List[Dict], List[RowError]]:
    """Lê o arquivo e separa linhas válidas de linhas com erro.

    :param path: caminho do CSV
    :param today: data ISO usada quando a linha não traz data válida
    :return: (linhas prontas para upsert, erros por linha)
    :raises OSError, UnicodeDecodeError, csv.Error: falhas de leitura do arquivo
    """
    valid: Dict[Tuple[str, str, str], Dict] = {}
    errors: List[RowError] = []
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.reader(f, delimiter=DELIMITER)
        next(reader, None)  # cabeçalho
        for number, row in enumerate(reader, start=1):
            if not any(cell.strip() for cell in row):
                continue
            description = clean_text(_cell(row, 0))
            brand = clean_text(_cell(row, 1))
            vendor = clean_text(_cell(row, 2))
            raw_price = _cell(row, 3)
            raw_date = clean_text(_cell(row, 4))

            try:
                price = parse_price(raw_price)
            except InvalidFormat:
                errors.append(RowError(number, raw_price, "preço inválido"))
                logger.warning("Importação CSV: preço inválido na linha %d: '%s'", number, raw_price)
                continue
            if not description or not vendor:
                errors.append(RowError(number, description or vendor, "descrição ou fornecedor vazio"))
                logger.warning("Importação CSV: campo obrigatório vazio na linha %d", number)
                continue

            updated_at = today
            if raw_date:
                try:
                    updated_at = parse_date(raw_date).isoformat()
                except ValueError:
                    logger.warning("Importação CSV: data inválida na linha %d: '%s' (usando %s)",
                                   number, raw_date, today)

            # a última linha com a mesma chave prevalece, como no ON CONFLICT
            key = (description, brand, vendor)
            valid.pop(key, None)
            valid[key] = {"description": description, "brand": brand, "vendor": vendor,
                          "price": price, "updated_at": updated_at}
    return list(valid.values()), errors


# 4. Importação
def import_csv(store: CatalogStore, path: Union[Path, str]) -> ImportSummary:
    try:
        try:
            rows, errors = read_rows(path, store.today().isoformat())
        except (OSError, UnicodeDecodeError, csv.Error) as ex:
            logger.error("Importação CSV: falha ao ler %s: %s", path, ex, exc_info=True)
            raise TransferFatalError(f"Erro ao importar: {ex}") from ex
        try:
            imported = store.bulk_upsert(rows)
        except CatalogError as ex:
            raise TransferFatalError(f"Erro ao importar: {ex.message}") from ex
    except CatalogError as ex:
        return ImportSummary(Status.TRANSFER_FATAL, ex.message)

    if errors:
        detail = "; ".join(str(e) for e in errors)
        message = f"CSV importado com {len(errors)} linha(s) ignorada(s): {detail}"
    else:
        message = "CSV importado com sucesso."
    # a transação já foi confirmada; falha na releitura só é avisada
    try:
        store.load_all()
    except CatalogError as ex:
        message += f" Porém a lista não pôde ser recarregada: {ex.message}"
    logger.info("Importação CSV: %s (+%d, ignoradas %d)", path, imported, len(errors))
    return ImportSummary(Status.OK, message, imported=imported, row_errors=errors)


# 5. Exportação
def export_csv(store: CatalogStore, path: Union[Path, str]) -> Outcome:
    items = list(store.items)
    try:
        with open(path, "w", encoding="utf-8-sig", newline="") as f:
            w = csv.writer(f, delimiter=DELIMITER)
            w.writerow(EXPORT_HEADER)
            for it in items:
                w.writerow([it.description, it.brand, it.vendor,
                            format_price_csv(it.price), it.updated_at.isoformat()])
    except (OSError, csv.Error) as ex:
        logger.error("Exportação CSV: falha ao gravar %s: %s", path, ex, exc_info=True)
        return Outcome(Status.TRANSFER_FATAL, f"Falha ao exportar: {ex}")
    logger.info("Exportação CSV: %s (%d linhas)", path, len(items))
    return Outcome.success("Exportado com sucesso.")
