import argparse
import logging

import cv2
import numpy as np

from segslam import ConvexRoi, RawImage, SegSlamFrontend
from segslam.core.measurement import Expectation
from segslam.core.observation import Landmark, Observation, Sensor


def make_frame(width, height, edge_y):
    """Synthetic frame: dark upper half, bright lower half, horizontal edge at edge_y."""
    img = np.full((height, width), 30, dtype=np.uint8)
    cv2.rectangle(img, (0, edge_y), (width - 1, height - 1), 220, -1)
    return img


def main():
    parser = argparse.ArgumentParser(description='Detect a segment, then match it in a moved frame')
    parser.add_argument('--config', type=str, default=None, help='Path to a YAML configuration file')
    parser.add_argument('--shift', type=int, default=3, help='Vertical motion of the edge in pixels')
    parser.add_argument('--verbose', action='store_true', help='Print debug messages')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    if args.config:
        frontend = SegSlamFrontend.from_config(args.config)
    else:
        frontend = SegSlamFrontend()
    camera = Sensor(0)

    # Frame 0: detect a candidate and initialize a landmark from it
    raw0 = RawImage(make_frame(320, 240, 120), timestamp=0.0)
    ok, feature = frontend.detect(raw0, ConvexRoi.from_rect(0, 60, 320, 120))
    if not ok:
        print("No segment detected.")
        return
    landmark = Landmark(0)
    init_obs = Observation(landmark, camera)
    frontend.initialize_observation(feature, init_obs)
    print(f"Detected {feature.measurement.x} -> {landmark}")

    # Frame 1: the filter predicts the segment where it was and matches it again
    raw1 = RawImage(make_frame(320, 240, 120 + args.shift), timestamp=0.1)
    obs = Observation(landmark, camera, expectation=Expectation(feature.measurement.x))
    obs.predicted_appearance.set_hypothesis(init_obs.observed_appearance.as_segment())
    if frontend.match_observation(raw1, obs, ConvexRoi.from_rect(0, 60, 320, 120)):
        print(f"Matched {obs.measurement.x} (std {obs.measurement.std})")
    else:
        print("Landmark not matched.")


if __name__ == "__main__":
    main()
