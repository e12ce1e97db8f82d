import unittest

from overlay_kit.letterbox import LetterboxGeometry, fit_preview, letterbox_geometry


class TestLetterboxGeometry(unittest.TestCase):
    def test_landscape_pads_y(self) -> None:
        lb = letterbox_geometry(2.0, 640)
        self.assertEqual(lb.padded_axis, "y")
        self.assertEqual(lb.content_width, 640.0)
        self.assertEqual(lb.content_height, 320.0)
        self.assertEqual(lb.pad, (0.0, 160.0))

    def test_portrait_pads_x(self) -> None:
        lb = letterbox_geometry(0.75, 640)
        self.assertEqual(lb.padded_axis, "x")
        self.assertEqual(lb.content_width, 480.0)
        self.assertEqual(lb.content_height, 640.0)
        self.assertEqual(lb.pad, (80.0, 0.0))

    def test_square_sensor_has_zero_padding(self) -> None:
        lb = letterbox_geometry(1.0, 640)
        self.assertEqual(lb.padded_axis, "x")
        self.assertEqual((lb.content_width, lb.content_height), (640.0, 640.0))
        self.assertEqual(lb.pad, (0.0, 0.0))

    def test_default_model_size(self) -> None:
        self.assertEqual(letterbox_geometry(1.0).model_size, 640.0)

    def test_invalid_inputs_rejected(self) -> None:
        with self.assertRaises(ValueError):
            letterbox_geometry(0.0)
        with self.assertRaises(ValueError):
            letterbox_geometry(-1.5)
        with self.assertRaises(ValueError):
            letterbox_geometry(float("nan"))
        with self.assertRaises(ValueError):
            letterbox_geometry(1.5, model_size=0)
        with self.assertRaises(ValueError):
            LetterboxGeometry(
                model_size=640, padded_axis="z", content_width=640, content_height=640, offset_x=0, offset_y=0
            )
        with self.assertRaises(ValueError):
            LetterboxGeometry(
                model_size=640, padded_axis="x", content_width=0, content_height=640, offset_x=320, offset_y=0
            )

    def test_only_one_axis_may_be_padded(self) -> None:
        for kwargs in (
            # X padded but Y content short and offset
            dict(padded_axis="x", content_width=480, content_height=320, offset_x=80, offset_y=160),
            # Y padded but X offset
            dict(padded_axis="y", content_width=640, content_height=320, offset_x=10, offset_y=160),
            # Y padded but X content short
            dict(padded_axis="y", content_width=600, content_height=320, offset_x=0, offset_y=160),
            # Content larger than the model input
            dict(padded_axis="x", content_width=700, content_height=640, offset_x=0, offset_y=0),
            # Negative offset
            dict(padded_axis="y", content_width=640, content_height=320, offset_x=0, offset_y=-5),
        ):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    LetterboxGeometry(model_size=640, **kwargs)

    def test_padded_offset(self) -> None:
        self.assertEqual(letterbox_geometry(2.0, 640).padded_offset, 160.0)
        self.assertEqual(letterbox_geometry(0.75, 640).padded_offset, 80.0)

    def test_nan_sizes_rejected(self) -> None:
        nan = float("nan")
        with self.assertRaises(ValueError):
            letterbox_geometry(1.5, nan)
        with self.assertRaises(ValueError):
            LetterboxGeometry(
                model_size=nan, padded_axis="x", content_width=480, content_height=640, offset_x=80, offset_y=0
            )
        with self.assertRaises(ValueError):
            LetterboxGeometry(
                model_size=640, padded_axis="x", content_width=nan, content_height=640, offset_x=80, offset_y=0
            )


class TestPreviewFit(unittest.TestCase):
    def test_matching_aspect_has_no_offsets(self) -> None:
        fit = fit_preview(2.0, (800, 400))
        self.assertEqual((fit.width, fit.height), (800.0, 400.0))
        self.assertEqual((fit.offset_x, fit.offset_y), (0.0, 0.0))

    def test_tall_camera_fits_by_height(self) -> None:
        fit = fit_preview(0.5, (1000, 1000))
        self.assertEqual((fit.width, fit.height), (500.0, 1000.0))
        self.assertEqual((fit.offset_x, fit.offset_y), (250.0, 0.0))

    def test_wide_camera_fits_by_width(self) -> None:
        fit = fit_preview(2.0, (1000, 1000))
        self.assertEqual((fit.width, fit.height), (1000.0, 500.0))
        self.assertEqual((fit.offset_x, fit.offset_y), (0.0, 250.0))

    def test_fit_preserves_aspect_and_bounds(self) -> None:
        for aspect in (0.3, 0.5625, 0.75, 1.0, 1.333, 1.7778, 4.0):
            for surface in ((390, 844), (1080, 1920), (1920, 1080), (500, 500)):
                fit = fit_preview(aspect, surface)
                self.assertAlmostEqual(fit.width / fit.height, aspect)
                self.assertLessEqual(fit.width, surface[0] + 1e-9)
                self.assertLessEqual(fit.height, surface[1] + 1e-9)
                self.assertAlmostEqual(fit.offset_x * 2 + fit.width, surface[0])
                self.assertAlmostEqual(fit.offset_y * 2 + fit.height, surface[1])

    def test_invalid_inputs_rejected(self) -> None:
        with self.assertRaises(ValueError):
            fit_preview(0.0, (100, 100))
        with self.assertRaises(ValueError):
            fit_preview(1.0, (0, 100))
        with self.assertRaises(ValueError):
            fit_preview(1.0, (float("nan"), 100))
        with self.assertRaises(ValueError):
            fit_preview(float("nan"), (100, 100))


if __name__ == "__main__":
    unittest.main()
