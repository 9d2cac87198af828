import csv
from django.conf import settings
from django.http import HttpResponse
import pytz
from rest_framework.response import Response
from rest_framework import status

class CSVExportMixin:
    """Mixin for CSV export functionality"""

    def get_csv_response(self, filename):
        """Returns a configured HttpResponse for CSV download"""
        response = HttpResponse(content_type="text/csv")
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        response["Access-Control-Expose-Headers"] = "Content-Disposition"
        return response

    def get_csv_writer(self, response, header):
        writer = csv.writer(response)
        writer.writerow(header)
        return writer

    def format_datetime_local(self, datetime_obj):
        """Formats datetime in the registry's local timezone"""
        if datetime_obj is None:
            return ""
        local_tz = pytz.timezone(settings.TIME_ZONE)
        return datetime_obj.astimezone(local_tz).strftime('%Y-%m-%d %H:%M %Z')

class EnvelopeResponseMixin:
    """Mixin for the {"success": true, "data": ...} response shape"""

    def success_response(self, data=None, message=None, status_code=status.HTTP_200_OK, **extra):
        body = {"success": True}
        if message:
            body["message"] = message
        if data is not None:
            body["data"] = data
        body.update(extra)
        return Response(body, status=status_code)

class ErrorHandlingMixin:
    """Mixin for common error handling patterns"""

    def _error(self, error, status_code):
        body = {"success": False}
        if isinstance(error, dict):
            body["message"] = "Validation failed"
            body["errors"] = error
        else:
            body["message"] = str(error)
        return Response(body, status=status_code)

    def handle_validation_error(self, error):
        return self._error(error, status.HTTP_400_BAD_REQUEST)

    def handle_permission_error(self, error):
        return self._error(error, status.HTTP_403_FORBIDDEN)

    def handle_not_found_error(self, error):
        return self._error(error, status.HTTP_404_NOT_FOUND)

    def handle_unknown_error(self, error):
        return self._error(
            f"An unexpected error occurred: {str(error)}",
            status.HTTP_500_INTERNAL_SERVER_ERROR
        )
