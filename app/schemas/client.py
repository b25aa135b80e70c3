from typing import Any, Dict, Optional
from pydantic import BaseModel


class ClientCapabilitiesResponse(BaseModel):
    """Capability flags and rendering hints derived from the caller's client hints."""
    is_low_power_mode: bool
    is_slow_connection: bool
    is_reduced_motion: bool
    low_memory: bool
    disable_animations: bool
    lazy_load_images: bool
    reduce_polling: bool
    image_quality: str
    signals: Dict[str, Optional[Any]]
