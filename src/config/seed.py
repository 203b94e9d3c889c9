"""
Dados iniciais da agência.

Departamentos e playlist com que a fila sobe quando
QUEUE['SEED_DEFAULTS'] está ativo (e no simulador).
"""

import logging

logger = logging.getLogger(__name__)


INITIAL_DEPARTMENTS = [
    {
        'id': '1',
        'name': 'Atendimento',
        'prefix': 'ATD',
        'description': 'Serviços de conta e gerência',
        'sub_categories': ['Pessoa Física', 'Pessoa Jurídica', 'Rural'],
    },
    {
        'id': '2',
        'name': 'Caixa',
        'prefix': 'CXA',
        'description': 'Pagamentos, saques e depósitos',
        'sub_categories': ['Pagamentos', 'Saques', 'Depósitos'],
    },
    {
        'id': '3',
        'name': 'Informações',
        'prefix': 'INF',
        'description': 'Dúvidas gerais e triagem',
        'sub_categories': [],
    },
]

INITIAL_MEDIA = [
    {
        'id': 'm1',
        'type': 'IMAGE',
        'title': 'Crédito Rural',
        'url': 'https://picsum.photos/1200/800?random=1',
        'duration': 10,
    },
    {
        'id': 'm2',
        'type': 'VIDEO',
        'title': 'Vídeo Institucional',
        'url': 'https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/BigBuckBunny.mp4',
        'duration': 30,
    },
    {
        'id': 'm3',
        'type': 'IMAGE',
        'title': 'Baixe o App',
        'url': 'https://picsum.photos/1200/800?random=2',
        'duration': 8,
    },
]


def seed_defaults(engine) -> None:
    """
    Carrega departamentos e playlist iniciais no engine.

    Idempotente: itens cujo ID já existe são ignorados.
    """
    existing_departments = {d.id for d in engine.departments}
    for dept in INITIAL_DEPARTMENTS:
        if dept['id'] in existing_departments:
            continue
        engine.add_department(
            name=dept['name'],
            prefix=dept['prefix'],
            description=dept['description'],
            sub_categories=dept['sub_categories'],
            department_id=dept['id'],
        )

    existing_media = {m.id for m in engine.marketing_playlist}
    for media in INITIAL_MEDIA:
        if media['id'] in existing_media:
            continue
        engine.add_media(
            media_type=media['type'],
            url=media['url'],
            title=media['title'],
            duration=media['duration'],
            media_id=media['id'],
        )

    logger.info(
        f"Dados iniciais carregados: {len(engine.departments)} departamentos, "
        f"{len(engine.marketing_playlist)} mídias"
    )
