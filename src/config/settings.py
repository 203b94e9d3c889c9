"""
Django Settings para QueueMaster.

Configurações organizadas por ambiente via variáveis de ambiente
(.env carregado com python-dotenv).

A fila não usa banco: o estado vive em memória no QueueEngine.
Django serve a API JSON; Celery executa efeitos colaterais.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Carregar variáveis de ambiente
load_dotenv()

# =============================================================================
# Caminhos Base
# =============================================================================

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SRC_DIR = BASE_DIR / 'src'

# =============================================================================
# Segurança
# =============================================================================

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv(
    'SECRET_KEY',
    'django-insecure-dev-key-change-in-production-please'
)

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.getenv('DEBUG', 'True').lower() in ('true', '1', 'yes')

ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')

# =============================================================================
# Aplicações
# =============================================================================

DJANGO_APPS = [
    'django.contrib.staticfiles',
]

LOCAL_APPS = [
    'src.adapters.django_app.queue',
]

INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

# =============================================================================
# Middleware
# =============================================================================

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'src.config.urls'

# =============================================================================
# Banco de Dados
# =============================================================================

# Sem persistência entre reinícios
DATABASES = {}

# =============================================================================
# Internacionalização
# =============================================================================

LANGUAGE_CODE = 'pt-br'
TIME_ZONE = 'America/Sao_Paulo'
USE_I18N = True
USE_TZ = False

# =============================================================================
# Arquivos Estáticos
# =============================================================================

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'src.core': {
            'handlers': ['console'],
            'level': os.getenv('CORE_LOG_LEVEL', 'DEBUG'),
            'propagate': False,
        },
        'src.adapters': {
            'handlers': ['console'],
            'level': os.getenv('ADAPTERS_LOG_LEVEL', 'DEBUG'),
            'propagate': False,
        },
    },
}

# =============================================================================
# Fila (Domain)
# =============================================================================

QUEUE = {
    # Locale do anúncio por voz ("pt-BR" ou "en-US")
    'LOCALE': os.getenv('QUEUE_LOCALE', 'pt-BR'),
    # Destaque do painel após nova chamada
    'FLASH_SECONDS': float(os.getenv('QUEUE_FLASH_SECONDS', 3)),
    # Rechamada só é anunciada se observada dentro desta janela
    'RECALL_WINDOW_SECONDS': float(os.getenv('QUEUE_RECALL_WINDOW_SECONDS', 1)),
    # "Últimas Chamadas" na TV
    'HISTORY_SIZE': int(os.getenv('QUEUE_HISTORY_SIZE', 4)),
    # 'logging' = só log | 'celery' = speak_announcement no worker
    'SPEECH_BACKEND': os.getenv('QUEUE_SPEECH_BACKEND', 'logging'),
    # 'sync' = LoggingEventPublisher | 'celery' = CeleryEventPublisher
    'EVENT_PUBLISHER_MODE': os.getenv('EVENT_PUBLISHER_MODE', 'sync'),
    # Departamentos e playlist iniciais no startup
    'SEED_DEFAULTS': os.getenv('QUEUE_SEED_DEFAULTS', 'True').lower() in ('true', '1', 'yes'),
    # Painel (anúncio + playlist) inicia junto com o app
    'DISPLAY_AUTOSTART': os.getenv('QUEUE_DISPLAY_AUTOSTART', 'True').lower() in ('true', '1', 'yes'),
    # Situação da fila logada pelo servidor a cada N segundos (0 desliga)
    'REPORT_INTERVAL_SECONDS': float(os.getenv('QUEUE_REPORT_INTERVAL', 300)),
    # Situação da fila logada pelo servidor a cada N segundos (0 desliga)
    'REPORT_INTERVAL_SECONDS': float(os.getenv('QUEUE_REPORT_INTERVAL', 300)),
}

# =============================================================================
# Celery / Event Bus
# =============================================================================

REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379')

CELERY_BROKER_URL = os.getenv('CELERY_BROKER_URL', REDIS_URL + '/0')
CELERY_RESULT_BACKEND = os.getenv('CELERY_RESULT_BACKEND', REDIS_URL + '/1')

CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'

CELERY_TIMEZONE = TIME_ZONE
CELERY_ENABLE_UTC = True

CELERY_TASK_ACKS_LATE = True
CELERY_WORKER_PREFETCH_MULTIPLIER = 1
