import cv2
import numpy as np

# Windows smaller than this are skipped; LSD finds nothing useful in them.
MIN_WINDOW_SIZE = 8


def to_gray(image):
    if image.ndim == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return image


def detect_segments(image, offset=(0, 0), min_length=0.0):
    """
    Detects line segments with OpenCV's Line Segment Detector.

    Args:
        image: Gray or BGR uint8 image (or a window of one).
        offset: (x, y) added to every endpoint, e.g. the window origin in the full image.
        min_length: Shortest segment kept, in pixels.

    Returns:
        N x 4 float array of segments (x1, y1, x2, y2), longest first.
    """
    gray = to_gray(image)
    if gray.shape[0] < MIN_WINDOW_SIZE or gray.shape[1] < MIN_WINDOW_SIZE:
        return np.empty((0, 4))

    lsd = cv2.createLineSegmentDetector(cv2.LSD_REFINE_STD)
    lines = lsd.detect(np.ascontiguousarray(gray))[0]
    if lines is None:
        return np.empty((0, 4))

    segs = lines.reshape(-1, 4).astype(np.float64)
    segs[:, [0, 2]] += offset[0]
    segs[:, [1, 3]] += offset[1]

    lengths = np.hypot(segs[:, 2] - segs[:, 0], segs[:, 3] - segs[:, 1])
    keep = lengths >= min_length
    segs, lengths = segs[keep], lengths[keep]
    # stable sort keeps LSD order among equal lengths
    order = np.argsort(-lengths, kind="stable")
    return segs[order]


def orient_like(seg, ref):
    """
    Orders the endpoints of seg so that it points the same way as ref.

    Args:
        seg: Segment (x1, y1, x2, y2).
        ref: Reference segment (x1, y1, x2, y2).

    Returns:
        seg, or seg with its endpoints swapped.
    """
    seg = np.asarray(seg, dtype=float)
    d_seg = seg[2:4] - seg[0:2]
    d_ref = np.asarray(ref[2:4], dtype=float) - np.asarray(ref[0:2], dtype=float)
    if np.dot(d_seg, d_ref) < 0:
        return np.concatenate([seg[2:4], seg[0:2]])
    return seg


def line_normal(seg):
    """Unit normal of the infinite line through seg, or None for a degenerate segment."""
    d = np.asarray(seg[2:4], dtype=float) - np.asarray(seg[0:2], dtype=float)
    norm = np.linalg.norm(d)
    if norm == 0:
        return None
    return np.array([-d[1], d[0]]) / norm


def overlap_ratio(seg, ref):
    """
    Fraction of ref covered by the projection of seg onto ref's direction.

    Returns:
        Value in [0, 1]; 0 for a degenerate ref.
    """
    P1 = np.asarray(ref[0:2], dtype=float)
    d = np.asarray(ref[2:4], dtype=float) - P1
    dd = np.dot(d, d)
    if dd == 0:
        return 0.0
    t = [np.dot(np.asarray(seg[0:2], dtype=float) - P1, d) / dd,
         np.dot(np.asarray(seg[2:4], dtype=float) - P1, d) / dd]
    lo, hi = max(min(t), 0.0), min(max(t), 1.0)
    return float(max(hi - lo, 0.0))
