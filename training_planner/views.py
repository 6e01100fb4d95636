"""
Training Planner Views - DSP (Digital Solutions Platform)

API-Endpoints für den Import eines Trainingsplans in die Projekt-Agenda:
- POST /api/training-planner/import-agenda/ - Startet einen Import-Job
- GET /api/training-planner/import-agenda/?jobId=<id> - Fortschritt eines Jobs

Der Import läuft im Hintergrund, der Client fragt den Status ab, bis der Job
``completed`` oder ``failed`` ist.

Author: DSP Development Team
Version: 1.0.0
"""

import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import AgendaImportRequestSerializer
from .services.agenda_import import AgendaImportService, ImportOptions

logger = logging.getLogger(__name__)


class AgendaImportView(APIView):
    """
    Startet Agenda-Importe und liefert deren Fortschritt.

    POST Request Body:
    {
        "projectId": 1,
        "trainingPlanId": 2,
        "selectedGroups": [3, 4],
        "includeAllParticipants": false,
        "followProjectHours": true,
        "assignByRole": false,
        "selectedRoles": [],
        "preserveExistingEvents": true
    }

    POST Response (202):
    {
        "success": true,
        "jobId": "...",
        "message": "Import process started. Use jobId to track progress."
    }
    """

    permission_classes = [IsAuthenticated]

    def get_service(self) -> AgendaImportService:
        return AgendaImportService()

    def post(self, request):
        serializer = AgendaImportRequestSerializer(data=request.data)
        if not serializer.is_valid():
            logger.info(f"Ungültiger Import-Request: {serializer.errors}")
            return Response(
                {
                    "success": False,
                    "message": "Project ID and Training Plan ID are required",
                    "errors": serializer.errors,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        options = ImportOptions.from_payload(serializer.validated_data)
        job = self.get_service().start_import(options)
        logger.info(f"Agenda-Import {job.job_id} durch {request.user} gestartet")

        return Response(
            {
                "success": True,
                "jobId": job.job_id,
                "message": "Import process started. Use jobId to track progress.",
            },
            status=status.HTTP_202_ACCEPTED,
        )

    def get(self, request):
        job_id = request.query_params.get("jobId")
        if not job_id:
            return Response({"error": "Job ID is required"}, status=status.HTTP_400_BAD_REQUEST)

        job = self.get_service().get_job(job_id)
        if job is None:
            return Response({"error": "Job not found"}, status=status.HTTP_404_NOT_FOUND)

        return Response(job.to_dict(), status=status.HTTP_200_OK)
