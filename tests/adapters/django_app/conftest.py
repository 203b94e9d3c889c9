"""
Configuração pytest para testes com Django.

Este arquivo configura:
- Django settings para testes (sem banco: a fila vive em memória)
- Container DI limpo a cada teste
- Fixtures de request
"""

import pytest


def pytest_configure(config):
    """Configura Django antes dos testes."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            ALLOWED_HOSTS=['testserver', 'localhost'],
            DATABASES={},
            INSTALLED_APPS=[
                'src.adapters.django_app.queue',
            ],
            ROOT_URLCONF='src.config.urls',
            MIDDLEWARE=[],
            USE_TZ=False,
            TIME_ZONE='America/Sao_Paulo',
            QUEUE={
                'SEED_DEFAULTS': False,
                'DISPLAY_AUTOSTART': False,
                'EVENT_PUBLISHER_MODE': 'sync',
                'SPEECH_BACKEND': 'logging',
                'REPORT_INTERVAL_SECONDS': 0,
                'REPORT_INTERVAL_SECONDS': 0,
            },
        )
        django.setup()


@pytest.fixture(autouse=True)
def reset_di_container():
    """Reset container entre testes."""
    from src.config.container import reset_container

    reset_container()
    yield
    reset_container()


@pytest.fixture
def rf():
    """Request Factory para criar requests."""
    from django.test import RequestFactory
    return RequestFactory()


@pytest.fixture
def client():
    """Django test client."""
    from django.test import Client
    return Client()


@pytest.fixture
def container():
    """Container global, já com a configuração de teste."""
    from src.config.container import get_container
    return get_container()


@pytest.fixture
def queue_engine(container):
    """Engine do container com o departamento Caixa (id "cxa")."""
    engine = container.queue_engine()
    engine.add_department(
        name="Caixa",
        prefix="CXA",
        sub_categories=["Pagamentos", "Saques"],
        department_id="cxa",
    )
    return engine
