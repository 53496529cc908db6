# src/batchforge/core/__init__.py
"""
Core do BatchForge.

Este pacote reúne as responsabilidades essenciais para planejamento,
execução e rastreabilidade de processamento de arquivos em lote, de
forma independente dos steps concretos.

Componentes principais:
    - config       → carregamento, merge e hashing de opções (YAML/JSON)
    - pipeline     → contratos de Step, opções, resultados e contexto
    - engine       → descoberta, planejamento e execução paralela
    - traceability → Manifest e Event Log por arquivo

Limites explícitos:
    - Não contém transformações de arquivo
    - Não depende de CLI ou serviços externos
"""
