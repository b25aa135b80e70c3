"""
Device capability detection from client hints.

Browsers report network and preference signals through client-hint headers
(Save-Data, ECT, Downlink, Sec-CH-Prefers-Reduced-Motion, Device-Memory).
Battery state has no header, so clients send it as query parameters.
Every signal is optional and parsed on its own; a malformed value is treated
as unknown and never fails the request.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Mapping, Optional
from app.core.config import settings

logger = logging.getLogger(__name__)

SLOW_EFFECTIVE_TYPES = {"slow-2g", "2g"}
KNOWN_EFFECTIVE_TYPES = {"slow-2g", "2g", "3g", "4g"}
LOW_MEMORY_GB = 2.0


@dataclass
class ClientSignals:
    save_data: bool = False
    effective_type: Optional[str] = None
    downlink_mbps: Optional[float] = None
    prefers_reduced_motion: Optional[str] = None
    device_memory_gb: Optional[float] = None
    battery_level: Optional[float] = None
    charging: Optional[bool] = None


@dataclass
class ClientCapabilities:
    is_low_power_mode: bool
    is_slow_connection: bool
    is_reduced_motion: bool
    low_memory: bool
    disable_animations: bool
    lazy_load_images: bool
    reduce_polling: bool
    image_quality: str
    signals: dict


def _get(source: Optional[Mapping[str, Any]], key: str) -> Any:
    if not source:
        return None
    # Starlette Headers are case-insensitive; plain dicts are not
    value = source.get(key)
    if value is None:
        value = source.get(key.lower())
    return value


def _strip_quotes(value: str) -> str:
    # Structured client hints may arrive quoted ("reduce")
    return value.strip().strip('"').strip().lower()


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    text = _strip_quotes(str(value))
    if text in ("1", "true", "yes", "on", "?1"):
        return True
    if text in ("0", "false", "no", "off", "?0"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def parse_signals(
    headers: Optional[Mapping[str, Any]] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> ClientSignals:
    """
    Read client hints from headers and battery state from params.

    Never raises.
    """
    signals = ClientSignals()

    try:
        raw = _get(headers, "Save-Data")
        if raw is not None:
            signals.save_data = _strip_quotes(str(raw)) == "on"
    except Exception as e:
        logger.debug(f"Ignoring Save-Data hint: {e}")

    try:
        raw = _get(headers, "ECT")
        if raw is not None:
            ect = _strip_quotes(str(raw))
            if ect in KNOWN_EFFECTIVE_TYPES:
                signals.effective_type = ect
    except Exception as e:
        logger.debug(f"Ignoring ECT hint: {e}")

    try:
        raw = _get(headers, "Downlink")
        if raw is not None:
            downlink = float(_strip_quotes(str(raw)))
            if downlink >= 0:
                signals.downlink_mbps = downlink
    except Exception as e:
        logger.debug(f"Ignoring Downlink hint: {e}")

    try:
        raw = _get(headers, "Sec-CH-Prefers-Reduced-Motion")
        if raw is not None:
            signals.prefers_reduced_motion = _strip_quotes(str(raw)) or None
    except Exception as e:
        logger.debug(f"Ignoring reduced-motion hint: {e}")

    try:
        raw = _get(headers, "Device-Memory")
        if raw is not None:
            memory = float(_strip_quotes(str(raw)))
            if memory > 0:
                signals.device_memory_gb = memory
    except Exception as e:
        logger.debug(f"Ignoring Device-Memory hint: {e}")

    try:
        raw = _get(params, "battery_level")
        if raw is not None:
            level = float(raw)
            if 0.0 <= level <= 1.0:
                signals.battery_level = level
    except Exception as e:
        logger.debug(f"Ignoring battery_level: {e}")

    try:
        raw = _get(params, "charging")
        if raw is not None:
            signals.charging = _parse_bool(raw)
    except Exception as e:
        logger.debug(f"Ignoring charging: {e}")

    return signals


def detect(signals: ClientSignals) -> ClientCapabilities:
    """
    Derive capability flags and rendering toggles from parsed signals.

    Unknown signals never trigger a degraded mode.
    """
    low_power = (
        signals.battery_level is not None
        and signals.battery_level <= settings.LOW_BATTERY_THRESHOLD
        and not signals.charging
    )
    slow = (
        signals.save_data
        or signals.effective_type in SLOW_EFFECTIVE_TYPES
        or (signals.downlink_mbps is not None and signals.downlink_mbps < settings.SLOW_DOWNLINK_MBPS)
    )
    reduced_motion = signals.prefers_reduced_motion == "reduce"
    low_memory = signals.device_memory_gb is not None and signals.device_memory_gb < LOW_MEMORY_GB

    if slow:
        image_quality = "low"
    elif low_power or low_memory or signals.effective_type == "3g":
        image_quality = "medium"
    else:
        image_quality = "high"

    return ClientCapabilities(
        is_low_power_mode=low_power,
        is_slow_connection=slow,
        is_reduced_motion=reduced_motion,
        low_memory=low_memory,
        disable_animations=reduced_motion or low_power,
        lazy_load_images=slow or low_memory,
        reduce_polling=slow or low_power,
        image_quality=image_quality,
        signals=asdict(signals),
    )
