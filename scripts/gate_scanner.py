#!/usr/bin/env python3
"""
Gate scanner
Opens a camera, decodes ticket QR codes and checks attendees in against
the configured attendee store (use the json or sqlite backend so the
Streamlit dashboard sees the same records).
"""

import argparse
import logging
import sys
from pathlib import Path

import cv2

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config import get_settings  # noqa: E402
from src.models.check_in import CheckInResult  # noqa: E402
from src.services.check_in_service import ScanEventSource  # noqa: E402
from src.services.registry import build_registry  # noqa: E402
from src.utils.logging_config import setup_logging  # noqa: E402

logger = logging.getLogger("gate_scanner")

WINDOW_TITLE = "Gate Scanner (press q to quit)"


def print_result(result: CheckInResult) -> None:
    icon = "✅" if result.success else "⚠️"
    print(f"{icon} {result.message}")


def scan(camera_number: int, cooldown: float) -> int:
    settings = get_settings()
    if settings.storage_backend == "memory":
        print("⚠️ STORAGE_BACKEND=memory: check-ins will not be visible to other processes")

    registry = build_registry(settings)
    source = ScanEventSource(registry, on_result=print_result, cooldown_seconds=cooldown)
    source.start()

    vcap = cv2.VideoCapture(camera_number)
    if not vcap.isOpened():
        print(f"❌ Cannot open camera {camera_number}")
        source.stop()
        return 1

    detector = cv2.QRCodeDetector()
    try:
        while True:
            ok, frame = vcap.read()
            if not ok:
                logger.warning("Camera frame could not be read")
                break
            cv2.imshow(WINDOW_TITLE, cv2.flip(frame, 1))
            try:
                qr_data, _bbox, _straight = detector.detectAndDecode(frame)
            except cv2.error:
                qr_data = ""
            if qr_data:
                source.submit(qr_data)
            if cv2.waitKey(50) & 0xFF == ord("q"):
                break
    finally:
        vcap.release()
        cv2.destroyAllWindows()
        source.stop()
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Scan ticket QR codes at the gate")
    parser.add_argument("--camera", type=int, default=0, help="OpenCV camera index")
    parser.add_argument("--cooldown", type=float, default=5.0, help="Seconds before the same code is accepted again")
    args = parser.parse_args()

    setup_logging(get_settings().log_level)
    return scan(args.camera, args.cooldown)


if __name__ == "__main__":
    sys.exit(main())
