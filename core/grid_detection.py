"""Board detection and rectification for puzzle screenshots."""

import cv2
import numpy as np

from .scan_config import DEFAULT_SCAN_CONFIG, ScanConfig


def threshold_for_board(gray_image, config: ScanConfig = DEFAULT_SCAN_CONFIG):
    """
    Binarize a grayscale screenshot so the board outline becomes foreground.

    Args:
        gray_image: Grayscale image
        config: Scan parameters (blur kernel, adaptive block size and C)

    Returns:
        Inverted binary image (outlines = 255)
    """
    k = config.blur_kernel
    blurred = cv2.GaussianBlur(gray_image, (k, k), 0)
    return cv2.adaptiveThreshold(
        blurred, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY_INV,
        config.threshold_block, config.threshold_c
    )


def find_board_contour(binary_image, config: ScanConfig = DEFAULT_SCAN_CONFIG):
    """
    Find the largest quadrilateral outline in a binary image.

    Contours below ``config.min_board_area`` are ignored.

    Returns:
        (4, 1, 2) int32 polygon, or None if no quadrilateral was found
    """
    contours, _ = cv2.findContours(binary_image, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

    max_area = 0
    best = None
    for contour in contours:
        area = cv2.contourArea(contour)
        if area < config.min_board_area:
            continue

        peri = cv2.arcLength(contour, True)
        approx = cv2.approxPolyDP(contour, config.poly_epsilon * peri, True)

        if len(approx) == 4 and area > max_area:
            max_area = area
            best = approx

    return best


def order_corners(points):
    """
    Order four points as top-left, top-right, bottom-right, bottom-left.

    The two points with the smallest y form the top edge, each edge is then
    ordered by x.
    """
    pts = np.asarray(points, dtype=np.float32).reshape(4, 2)
    by_y = pts[np.argsort(pts[:, 1], kind='stable')]
    top = by_y[:2][np.argsort(by_y[:2, 0], kind='stable')]
    bottom = by_y[2:][np.argsort(by_y[2:, 0], kind='stable')]
    return np.array([top[0], top[1], bottom[1], bottom[0]], dtype=np.float32)


def warp_board(image, contour, size: int = 600):
    """Perspective-correct the board quadrilateral into a size x size image."""
    src = order_corners(contour)
    dst = np.array([[0, 0], [size, 0], [size, size], [0, size]], dtype=np.float32)
    M = cv2.getPerspectiveTransform(src, dst)
    return cv2.warpPerspective(image, M, (size, size))


def detect_board(image_bgr, config: ScanConfig = DEFAULT_SCAN_CONFIG):
    """
    Locate and rectify the board in a screenshot.

    Returns:
        (warped board image, bounding rect (x, y, w, h)) or (None, None)
    """
    gray = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2GRAY)
    binary = threshold_for_board(gray, config)
    contour = find_board_contour(binary, config)
    if contour is None:
        return None, None

    warped = warp_board(image_bgr, contour, config.warp_size)
    return warped, tuple(int(v) for v in cv2.boundingRect(contour))
