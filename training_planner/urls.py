from django.urls import path

from .views import AgendaImportView

app_name = "training_planner"

urlpatterns = [
    # Agenda-Import (Start und Status)
    path("import-agenda/", AgendaImportView.as_view(), name="import-agenda"),
]
