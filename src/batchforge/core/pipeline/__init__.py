"""
# Pipeline Core — BatchForge

Este pacote define os **contratos canônicos** e as **estruturas
fundamentais** consumidas pelo engine do BatchForge.

Um pipeline é uma **cadeia fixa e ordenada de Steps** aplicada a cada
arquivo de entrada; não há grafo arbitrário entre steps.

## Componentes

- **types**
  - `StepOutcome`: desfechos finais por arquivo
  - `StepResult`: resultado imutável por arquivo
  - `ValidationResult`: erros e warnings de validação
  - `PipelineProgress` / `StepProgress`: eventos de progresso

- **options**
  - `PipelineOptions`, `StepOptions`, `validate_options`

- **step**
  - `Step` (Protocol): contrato que toda transformação satisfaz

- **cancellation**
  - `CancellationToken`: sinal cooperativo de cancelamento

- **context**
  - `RunContext`: log estruturado, warnings e manifest de uma run

- **registry**
  - `StepRegistry`: unicidade de `step.id` e ordem da cadeia

## Limites Explícitos

- Não planeja execução
- Não executa pipeline
- Não contém lógica de transformação de arquivos
"""
