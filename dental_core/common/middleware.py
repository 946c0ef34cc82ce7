# dental_core/common/middleware.py
from __future__ import annotations

import logging
import re

from django.utils.deprecation import MiddlewareMixin

from dental_core.common.api.exceptions import ensure_request_id

logger = logging.getLogger(__name__)

_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9\-]{8,64}$")


class RequestIdMiddleware(MiddlewareMixin):
    """
    Stamps every request with request.request_id (reusing a sane inbound X-Request-Id)
    and echoes it back, so the id in an error envelope matches the response header
    and the log line.
    """

    HEADER_META_KEY = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-Id"

    def process_request(self, request):
        inbound = request.META.get(self.HEADER_META_KEY, "")
        if inbound and _SAFE_REQUEST_ID.match(inbound):
            request.request_id = inbound
        ensure_request_id(request)
        return None

    def process_response(self, request, response):
        rid = ensure_request_id(request)
        response[self.RESPONSE_HEADER] = rid

        if response.status_code >= 500:
            logger.error("%s %s -> %s [%s]", request.method, request.path, response.status_code, rid)
        elif response.status_code >= 400:
            logger.info("%s %s -> %s [%s]", request.method, request.path, response.status_code, rid)
        return response
