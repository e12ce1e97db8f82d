import argparse
import logging

import cv2
import numpy as np

from overlay_kit import draw_screen_boxes, load_pipeline


def _parse_size(value: str):
    try:
        w, h = value.lower().split("x", 1)
        return float(w), float(h)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {value!r}") from exc


def main() -> int:
    parser = argparse.ArgumentParser(description="Map a dumped detector output tensor to screen boxes.")
    parser.add_argument("--tensor", required=True, help="Path to a .npy dump of the raw model output.")
    parser.add_argument("--config", default="configs/overlay.json", help="Overlay config JSON.")
    parser.add_argument("--image", default=None, help="Optional camera frame (BGR) to use as the rendering surface.")
    parser.add_argument("--surface", type=_parse_size, default=None, help="Surface size WIDTHxHEIGHT (default: image size).")
    parser.add_argument("--camera-aspect", type=float, default=None, help="Camera preview aspect ratio (width / height).")
    parser.add_argument("--sensor-aspect", type=float, default=None, help="Sensor aspect ratio if it differs from the camera's.")
    parser.add_argument("--out", default=None, help="Optional output path for the drawn overlay.")
    parser.add_argument("--show", action="store_true", help="Show a window with the overlay.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pipeline = load_pipeline(args.config)
    preds = np.load(args.tensor)

    img = None
    if args.image is not None:
        img = cv2.imread(args.image)
        if img is None:
            raise FileNotFoundError(f"Could not read image at path: {args.image}")

    surface = args.surface
    if surface is None:
        if img is None:
            raise ValueError("--surface is required without --image")
        surface = (float(img.shape[1]), float(img.shape[0]))

    camera_aspect = args.camera_aspect
    if camera_aspect is None:
        if img is None:
            raise ValueError("--camera-aspect is required without --image")
        camera_aspect = img.shape[1] / img.shape[0]

    boxes = pipeline(
        preds,
        camera_aspect_ratio=camera_aspect,
        surface_size=surface,
        sensor_aspect_ratio=args.sensor_aspect,
    )
    for box in boxes:
        print(box.label, tuple(round(v, 1) for v in box.as_ltwh()))

    if img is not None:
        vis = draw_screen_boxes(img, boxes)
        if args.out:
            ok = cv2.imwrite(args.out, vis)
            if not ok:
                raise RuntimeError(f"Failed to write output image: {args.out}")
        if args.show:
            cv2.imshow("overlay", vis)
            cv2.waitKey(0)
            cv2.destroyAllWindows()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
