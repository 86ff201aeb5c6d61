"""
Finalidade:
    Inicialização da aplicação e linha de comando sem interface gráfica.

Como funciona:
    - bootstrap(): lê o config.toml, cria as pastas, inicia o log, abre o DB
      (esquema garantido) e devolve a CatalogSession pronta para a interface.
    - main(): comandos de linha para listar, importar e exportar o catálogo.
      A conexão com o banco é fechada ao final (contextlib.closing).

Estilo:
    - Seções numeradas e comentários curtos.
"""

# 1. Importação
import argparse
import logging
from contextlib import closing
from pathlib import Path
from typing import List, Optional

from .db import DB
from .money import set_display_locale
from .session import CatalogSession, ViewMode
from .store import CatalogStore
from .utils import ensure_folders, init_logging, load_config, resolve_path

logger = logging.getLogger(__name__)


# 2. Inicialização
def bootstrap(config: Optional[dict] = None) -> CatalogSession:
    """Prepara config, log e banco; devolve a sessão do catálogo.

    :param config: configuração já carregada (padrão: load_config())
    """
    config = config or load_config()
    ensure_folders()
    init_logging(str(resolve_path(config["app"]["log_path"])))
    set_display_locale(config["catalog"].get("display_locale", "pt_BR"))
    db = DB(resolve_path(config["app"]["db_path"]))
    db.init_schema()
    return CatalogSession(CatalogStore(db))


# 3. Linha de comando
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="catalogo", description="Catálogo Elétrico de Preços")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="Lista os itens cadastrados")
    p_list.add_argument("--outdated", action="store_true", help="Somente itens desatualizados (mais de um mês)")
    p_list.add_argument("--search", default="", help="Filtro de texto livre")

    p_import = sub.add_parser("import", help="Importa um CSV (separador ';')")
    p_import.add_argument("path", type=Path)

    p_export = sub.add_parser("export", help="Exporta o catálogo para CSV")
    p_export.add_argument("path", type=Path)
    p_export.add_argument("--outdated", action="store_true", help="Exporta somente itens desatualizados")
    return parser


def run(session: CatalogSession, args: argparse.Namespace) -> int:
    if args.command == "list":
        if args.outdated:
            session.set_view_mode(ViewMode.OUTDATED)
        items = session.search(args.search)
        if not items:
            print("(nenhum item)")
        for it in items:
            print(f"{it.id:>6}  {session.item_label(it)}")
        return 0 if session.status is None or session.status.ok else 1

    if args.command == "import":
        summary = session.import_csv(args.path)
        print(summary.message)
        return 0 if summary.ok else 1

    if args.command == "export":
        if args.outdated:
            session.set_view_mode(ViewMode.OUTDATED)
        outcome = session.export_csv(args.path)
        print(outcome.message)
        return 0 if outcome.ok else 1

    return 2


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    session = bootstrap()
    with closing(session.store.db):
        return run(session, args)
