"""
Quiz Engine Views Package

Dieses Paket enthält alle Views der Quiz-Engine.

Features:
- Schüler-Views: Quiz starten, Antworten abgeben, Versuch abschließen, Ergebnisse
- Lehrer-Views: Quiz- und Fragenverwaltung, manuelle Bewertung

Author: DSP Development Team
Version: 1.0.0
"""

from .student_views import *
from .teacher_views import *
