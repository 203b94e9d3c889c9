"""
Adapters de voz do painel.

- LoggingSpeechSynthesizer: registra o texto no log (desenvolvimento)
- CelerySpeechSynthesizer: enfileira speak_announcement (produção)

Ambos são fire-and-forget: speak() volta imediatamente.
"""

import logging

logger = logging.getLogger(__name__)


class LoggingSpeechSynthesizer:
    """Sintetizador que apenas loga o anúncio."""

    def __init__(self, log_level: int = logging.INFO):
        self._log_level = log_level

    def speak(self, text: str, locale: str) -> None:
        logger.log(self._log_level, f"[SPEECH] ({locale}) {text}")


class CelerySpeechSynthesizer:
    """
    Sintetizador que delega ao worker Celery.

    Falha ao enfileirar propaga para o AnnouncementDispatcher,
    que registra o WARNING e segue.
    """

    def speak(self, text: str, locale: str) -> None:
        from src.adapters.django_app.events.handlers import speak_announcement
        speak_announcement.delay(text, locale)


def get_speech_synthesizer(backend: str = "logging"):
    """
    Factory conforme QUEUE['SPEECH_BACKEND'].

    Raises:
        ValueError: Se backend desconhecido
    """
    backend = (backend or "logging").strip().lower()
    if backend == "celery":
        return CelerySpeechSynthesizer()
    if backend == "logging":
        return LoggingSpeechSynthesizer()
    raise ValueError(f"Backend de voz desconhecido: {backend}")
