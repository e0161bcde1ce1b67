"""
Acknowledgments for Daraja callbacks

Safaricom posts results to the configured callback, confirmation, validation,
result and timeout URLs and expects a small JSON acknowledgment back. The
acknowledgment is always sent with HTTP 200; a non-200 reply makes Daraja
retry the delivery.
"""

from typing import Dict, Optional

from flask import jsonify

RESULT_CODE_SUCCESS = "00000000"
RESULT_CODE_ERROR = "00000001"


def callback_ack(success: bool = True, description: Optional[str] = None) -> Dict[str, str]:
    if success:
        return {"ResultCode": RESULT_CODE_SUCCESS, "ResultDesc": description or "Success"}
    return {"ResultCode": RESULT_CODE_ERROR, "ResultDesc": description or "Failed"}


def ack_response(success: bool = True, description: Optional[str] = None):
    """Flask response tuple for a callback view; requires an app context."""
    return jsonify(callback_ack(success, description)), 200
