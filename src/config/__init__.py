"""
Configuração do projeto QueueMaster.

Módulos:
- settings: Configurações Django (inclui o dicionário QUEUE)
- urls: Rotas principais
- celery: Configuração Celery para tarefas assíncronas
- container: Dependency Injection Container
- seed: Departamentos e playlist iniciais
"""

# Importar app Celery para que seja carregado com Django
from .celery import app as celery_app

__all__ = ('celery_app',)
