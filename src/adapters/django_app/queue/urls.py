"""
URL patterns da fila.

Endpoints API JSON:
- GET  /queue/api/state/ - Snapshot da fila
- GET/POST /queue/api/tickets/ - Listar / emitir senha
- GET  /queue/api/tickets/waiting/ - Aguardando (ordem de chamada)
- POST /queue/api/call-next/ - Chamar próxima
- POST /queue/api/tickets/<id>/recall|finish|cancel/ - Ações
- GET/POST /queue/api/departments/, DELETE /queue/api/departments/<id>/
- GET/POST /queue/api/playlist/, DELETE /queue/api/playlist/<id>/
- GET  /queue/api/display/ - Painel (TV)
"""

from django.urls import path
from . import api_views

app_name = 'queue'

urlpatterns = [
    path('api/state/', api_views.QueueStateAPIView.as_view(), name='api_state'),

    # Senhas (waiting antes do <pk> para não conflitar)
    path('api/tickets/', api_views.TicketAPIListView.as_view(), name='api_tickets'),
    path('api/tickets/waiting/', api_views.WaitingTicketsAPIView.as_view(), name='api_waiting'),
    path('api/call-next/', api_views.CallNextAPIView.as_view(), name='api_call_next'),
    path('api/tickets/<str:pk>/recall/', api_views.TicketRecallAPIView.as_view(), name='api_recall'),
    path('api/tickets/<str:pk>/finish/', api_views.TicketFinishAPIView.as_view(), name='api_finish'),
    path('api/tickets/<str:pk>/cancel/', api_views.TicketCancelAPIView.as_view(), name='api_cancel'),

    # Administração
    path('api/departments/', api_views.DepartmentAPIListView.as_view(), name='api_departments'),
    path('api/departments/<str:pk>/', api_views.DepartmentAPIDetailView.as_view(), name='api_department_detail'),
    path('api/playlist/', api_views.PlaylistAPIListView.as_view(), name='api_playlist'),
    path('api/playlist/<str:pk>/', api_views.PlaylistAPIDetailView.as_view(), name='api_media_detail'),

    # Painel
    path('api/display/', api_views.DisplayAPIView.as_view(), name='api_display'),
]
