"""Low-level image operations."""

import cv2
import numpy as np


def load_image_bgr(file_path):
    """Load image using OpenCV (BGR format)."""
    img = cv2.imread(str(file_path))
    if img is None:
        raise ValueError(f"Could not load image: {file_path}")
    return img


def to_grayscale(image):
    """Convert BGR (or BGRA) image to grayscale."""
    if len(image.shape) == 2:
        return image
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def to_bgr(image):
    """Drop alpha / expand grayscale so the image has 3 BGR channels."""
    if len(image.shape) == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
    return image


def mean_color_rgb(image_bgr: np.ndarray):
    """Mean (r, g, b) of a BGR region."""
    b, g, r = cv2.mean(image_bgr)[:3]
    return r, g, b
