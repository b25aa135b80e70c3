import logging
from fastapi import APIRouter, Request, Response

from app.schemas.client import ClientCapabilitiesResponse
from app.services import client_capabilities

router = APIRouter(prefix="/client", tags=["Client"])
logger = logging.getLogger(__name__)

# Hints the browser should send on subsequent requests
ACCEPT_CH = "Save-Data, ECT, Downlink, Device-Memory, Sec-CH-Prefers-Reduced-Motion"


@router.get("/capabilities", response_model=ClientCapabilitiesResponse)
def get_capabilities(request: Request, response: Response):
    """
    Capability flags for the calling device.

    Network and motion preferences come from client-hint headers; battery
    state from the battery_level (0..1) and charging query parameters.
    Unknown or malformed signals are ignored.
    """
    signals = client_capabilities.parse_signals(request.headers, request.query_params)
    capabilities = client_capabilities.detect(signals)
    response.headers["Accept-CH"] = ACCEPT_CH
    response.headers["Vary"] = ACCEPT_CH
    return ClientCapabilitiesResponse(**vars(capabilities))
