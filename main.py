"""
Finalidade: Ponto de entrada da aplicação.
Como funciona:
- Prepara logs e banco de dados.
- Executa o comando pedido (listar, importar, exportar).
"""
# 1. Importação
import sys

from catalogo_eletrico.app import main

# 2. Ponto de entrada
if __name__ == "__main__":
    sys.exit(main())
