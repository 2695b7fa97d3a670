"""
Horloges injectables pour les échéances, expirations et comptes à rebours
"""
from django.conf import settings
from django.utils import timezone
from django.utils.module_loading import import_string


class SystemClock:
    """Horloge réelle basée sur django.utils.timezone"""

    def now(self):
        return timezone.now()

    def today(self):
        return timezone.localdate(self.now())


class FixedClock(SystemClock):
    """Horloge figée, utilisée dans les tests et les traitements rejoués"""

    def __init__(self, now):
        if timezone.is_naive(now):
            now = timezone.make_aware(now)
        self._now = now

    def now(self):
        return self._now

    def advance(self, delta):
        self._now = self._now + delta
        return self._now


def get_clock():
    """Instancie l'horloge configurée dans settings.QUALITE['CLOCK']"""
    path = getattr(settings, 'QUALITE', {}).get('CLOCK', 'shared.clock.SystemClock')
    return import_string(path)()
