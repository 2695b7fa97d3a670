"""
URL configuration for QUALIOPI project.

Toutes les API qualité sont exposées sous /api/quality/.
"""
from django.contrib import admin
from django.shortcuts import redirect
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static


def root_view(request):
    """Rediriger la racine vers l'interface d'administration."""
    return redirect('admin:index')


urlpatterns = [
    path('', root_view, name='api_root'),
    path('admin/', admin.site.urls),
    path('api/quality/', include('indicateurs.urls')),
    path('api/quality/', include('documentation.urls')),
    path('api/quality/', include('pac.urls')),
    path('api/quality/', include('taches.urls')),
    path('api/quality/', include('audits.urls')),
    path('api/quality/', include('bpf.urls')),
    path('api/quality/', include('dashboard.urls')),
    path('api/quality/', include('invitations.urls')),
    path('api/parametre/', include('parametre.urls')),
]

# Servir les fichiers média en développement
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
