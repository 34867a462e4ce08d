import cv2
import numpy as np


class RawImage:
    """
    Read-only handle over a camera image shared by the caller, the matcher and the detector.

    The pixel array is exposed through a non-writeable view, so holding the handle
    never allows a processor to alter the frame.
    """
    def __init__(self, img, timestamp=0.0):
        """
        Args:
            img: numpy array of shape (H, W) or (H, W, 3), dtype uint8.
            timestamp: Acquisition time of the frame in seconds.
        """
        if not isinstance(img, np.ndarray):
            raise TypeError("img must be a numpy ndarray")
        if img.ndim not in (2, 3):
            raise ValueError("img must be 2D (gray) or 3D (BGR)")
        if img.dtype != np.uint8:
            raise ValueError("img must have dtype uint8")

        view = img.view()
        view.flags.writeable = False
        self._img = view
        self.timestamp = float(timestamp)

    @property
    def img(self):
        return self._img

    @property
    def width(self):
        return self._img.shape[1]

    @property
    def height(self):
        return self._img.shape[0]


class ConvexRoi:
    """
    Convex polygonal region of an image used to bound a search.
    """
    def __init__(self, points):
        """
        Args:
            points: Iterable of (x, y) pixel positions; their convex hull is the region.
        """
        pts = np.asarray(points, dtype=np.float32).reshape(-1, 2)
        if len(pts) < 3:
            raise ValueError("A region needs at least 3 points")
        self.polygon = cv2.convexHull(pts).reshape(-1, 2)

    @classmethod
    def from_rect(cls, x, y, w, h):
        """Builds the region covering pixels [x, x + w) x [y, y + h)."""
        if w <= 0 or h <= 0:
            raise ValueError("Rectangle width and height must be positive")
        return cls([(x, y), (x + w, y), (x + w, y + h), (x, y + h)])

    def contains(self, x, y):
        """Returns True if (x, y) lies inside the region or on its border."""
        return cv2.pointPolygonTest(self.polygon, (float(x), float(y)), False) >= 0

    def bounding_box(self):
        """
        Returns:
            (x0, y0, x1, y1) integer bounds enclosing the region, x1/y1 exclusive.
        """
        x0, y0 = np.floor(self.polygon.min(axis=0)).astype(int)
        x1, y1 = np.ceil(self.polygon.max(axis=0)).astype(int)
        return int(x0), int(y0), int(x1), int(y1)

    def clip(self, shape):
        """
        Intersects the bounding box with an image of the given shape.

        Returns:
            (x0, y0, x1, y1) window inside the image, possibly empty (x1 <= x0 or y1 <= y0).
        """
        h, w = shape[:2]
        x0, y0, x1, y1 = self.bounding_box()
        return max(x0, 0), max(y0, 0), min(x1, w), min(y1, h)
