"""
Core Domain Layer - O Hexágono.

Lógica da fila de atendimento sem dependências de frameworks:
- queue: registro de senhas, seleção prioridade/FIFO e QueueEngine
- display: anúncio de chamadas e rotação da playlist de marketing

Características:
- Zero dependências externas (Django, Celery, etc.)
- 100% testável sem infraestrutura
"""
