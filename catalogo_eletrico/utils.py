"""
Finalidade: Utilitários (configuração, pastas, logging).
"""
# 1. Importação
import copy
import logging
import tomllib
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

ROOT = Path(__file__).resolve().parents[1]
CONFIG_PATH = ROOT / "config.toml"
DATA_DIR = ROOT / "data"
LOGS_DIR = ROOT / "logs"

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "app": {
        "db_path": "data/infra_items.db",
        "log_path": "logs/app.log",
    },
    "catalog": {
        "display_locale": "pt_BR",
    },
}

# 2. Pastas
def ensure_folders():
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    LOGS_DIR.mkdir(parents=True, exist_ok=True)

# 3. Configuração
def load_config(path: Optional[Path] = None) -> dict:
    """Lê o config.toml e completa as chaves ausentes com DEFAULT_CONFIG.

    :param path: caminho alternativo do arquivo (padrão: CONFIG_PATH)
    :return: dicionário de configuração por seção
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    path = Path(path) if path is not None else CONFIG_PATH
    if path.exists():
        with open(path, "rb") as f:
            loaded = tomllib.load(f)
        for section, values in loaded.items():
            if isinstance(values, dict):
                config.setdefault(section, {}).update(values)
            else:
                config[section] = values
    return config


def resolve_path(value: str) -> Path:
    """Caminhos relativos do config são resolvidos a partir da raiz do projeto."""
    p = Path(value)
    return p if p.is_absolute() else (ROOT / p).resolve()

# 4. Logs
def init_logging(log_path: str):
    handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    handler.setFormatter(fmt)
    lg = logging.getLogger()
    lg.setLevel(logging.INFO)
    lg.addHandler(handler)
    lg.info("Logging inicializado")
