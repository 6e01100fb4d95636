"""
Training Planner - DSP (Digital Solutions Platform)

Django-App für Trainingsprojekte und den Import von Trainingsplänen in die
Projekt-Agenda (Arbeitskalender, Gruppenplanung, Mittagspausen, Import-Jobs).

Author: DSP Development Team
Version: 1.0.0
"""
