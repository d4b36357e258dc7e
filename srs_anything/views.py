from django.apps import apps
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response


@api_view(["GET"])
def health(request):
    return Response({"status": "ok"}, status=status.HTTP_200_OK)


@api_view(["GET"])
def schedule(request):
    """
    Returns the schedule this process loaded at startup.
    """
    active = apps.get_app_config("scheduler").schedule
    return Response(
        {
            "unit": active.unit.value,
            "intervals": list(active.intervals),
            "max_index": active.max_index(),
        },
        status=status.HTTP_200_OK,
    )
