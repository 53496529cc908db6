# src/batchforge/core/engine/__init__.py
"""
Engine do BatchForge.

Este pacote contém a implementação responsável por **descobrir**,
**planejar** e **executar** o processamento de arquivos em lote.

Componentes principais:
    - discovery → resolução da entrada em uma lista ordenada de arquivos
    - plan      → estruturas imutáveis do plano (PipelinePlan, PlannedOperation)
    - planner   → decisão por arquivo: processar ou ignorar, e com qual saída
    - publish   → temporários e publicação atômica de saídas
    - results   → coletor thread-safe e PipelineResult terminal
    - engine    → PipelineExecutor (pool limitado, cancelamento, fail-fast)

Princípios fundamentais:
    - Planejamento e execução são responsabilidades separadas
    - Dry-run é estritamente livre de efeitos colaterais
    - Falhas são isoladas por arquivo e retornadas como dados

Limites explícitos:
    - Não define Steps de domínio
    - Não persiste resultados automaticamente
    - Não depende de CLI ou UI
"""
