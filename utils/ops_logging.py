import datetime
import json
import logging

logger = logging.getLogger("hifz.events")


def log_structured(event: str, level: int = logging.INFO, **fields):
    """One JSON line per domain event."""
    payload = {
        "event": event,
        "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="seconds"),
    }
    payload.update(fields)
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))
