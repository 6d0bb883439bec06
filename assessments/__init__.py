"""
Assessments Package - Quiz Engine

Dieses Paket enthält die Quiz-Engine der Lernplattform: Versuche,
Antworterfassung, automatische und manuelle Bewertung sowie die
Punkteberechnung.

Features:
- Quiz- und Fragenverwaltung für Lehrkräfte
- Versuchs-Lebenszyklus mit Zeitlimit und Versuchsbegrenzung
- Automatische Bewertung für Auswahlfragen
- Manuelle Bewertung für Freitext- und Code-Fragen
- Benachrichtigungen bei Veröffentlichung und Bewertung

Struktur:
- courses/: Kurs- und Einschreibungsdaten (Schnittstelle zur Kursverwaltung)
- notifications/: Benachrichtigungs-Senke
- quizzes/: Modelle, Services und Views der Quiz-Engine
- management/: Django Management Commands

Author: DSP Development Team
Version: 1.0.0
"""
