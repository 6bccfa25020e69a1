"""
Example: connect to Home Assistant and toggle a light.

Usage:
    HASS_TOKEN=... python examples/basic_usage.py 192.168.1.10 light.kitchen
"""

import logging
import os
import sys

from hass_rest import HomeAssistantError, Session, call_service, get_state, setup_logging

setup_logging()
logger = logging.getLogger(__name__)


def main():
    if len(sys.argv) != 3:
        print(__doc__)
        return 1
    host, entity_id = sys.argv[1], sys.argv[2]

    with Session(timeout=10) as session:
        try:
            logger.info(session.connect(host, os.environ.get("HASS_TOKEN", "")))
            before = get_state(session, entity_id)
            call_service(session, "toggle", entity_id=entity_id)
            after = get_state(session, entity_id)
        except HomeAssistantError as e:
            logger.error(f"{e.kind.value}: {e.message}")
            return 1

    logger.info(f"{entity_id}: {before['state']} -> {after['state']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
