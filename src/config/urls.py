"""
URL Configuration para QueueMaster.

Estrutura:
- /queue/api/ - API JSON da fila (totem, guichês, TV, administração)
- /health/ - Health check
"""

from django.http import JsonResponse
from django.urls import path, include


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    path('queue/', include('src.adapters.django_app.queue.urls')),
    path('health/', health, name='health'),
]
