"""Foreground blob extraction for piece tray slots."""

import cv2
import numpy as np

from core.image_utils import to_grayscale
from .piece_shapes import Blob, SlotCapture


def threshold_slot(slot_gray):
    """Otsu binarization of a slot (bright blocks = 255)."""
    _, thresh = cv2.threshold(slot_gray, 128, 255, cv2.THRESH_BINARY | cv2.THRESH_OTSU)
    return thresh


def find_blobs(binary_image):
    """Bounding box and contour area of every external contour."""
    contours, _ = cv2.findContours(binary_image, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    blobs = []
    for contour in contours:
        x, y, w, h = cv2.boundingRect(contour)
        blobs.append(Blob(x=int(x), y=int(y), width=int(w), height=int(h),
                          area=float(cv2.contourArea(contour))))
    return blobs


def detect_slot_blobs(slot_image, origin_x: int = 0, origin_y: int = 0) -> SlotCapture:
    """
    Threshold a tray slot and collect its blobs.

    Args:
        slot_image: Slot crop (grayscale or BGR)
        origin_x, origin_y: Slot position in the source image

    Returns:
        SlotCapture ready for shape inference
    """
    gray = np.ascontiguousarray(to_grayscale(slot_image))
    thresh = threshold_slot(gray)
    height, width = thresh.shape[:2]
    return SlotCapture(
        blobs=find_blobs(thresh),
        bitmap=thresh,
        width=width,
        height=height,
        origin_x=origin_x,
        origin_y=origin_y,
    )
