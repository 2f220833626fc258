from rest_framework.response import Response
from rest_framework import status


class APIResponse(Response):
    """Standard API envelopes"""

    @staticmethod
    def success(data=None, message="OK", code=status.HTTP_200_OK):
        return Response({"success": True, "message": message, "data": data}, status=code)

    @staticmethod
    def created(data=None, message="Created"):
        return Response({"success": True, "message": message, "data": data}, status=status.HTTP_201_CREATED)

    @staticmethod
    def not_found(message="Not found"):
        return Response({"success": False, "message": message}, status=status.HTTP_404_NOT_FOUND)

    @staticmethod
    def validation_error(errors, message="Validation failed", data=None):
        body = {"success": False, "message": message, "errors": errors}
        if data is not None:
            body["data"] = data
        return Response(body, status=status.HTTP_400_BAD_REQUEST)

    @staticmethod
    def forbidden(message="Access denied"):
        return Response({"success": False, "message": message}, status=status.HTTP_403_FORBIDDEN)

    @staticmethod
    def conflict(message="Conflict", data=None):
        return Response({"success": False, "message": message, "data": data}, status=status.HTTP_409_CONFLICT)

    @staticmethod
    def error(message="Internal server error", code=status.HTTP_500_INTERNAL_SERVER_ERROR):
        return Response({"success": False, "message": message}, status=code)
