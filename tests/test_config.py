import pathlib
import tempfile
import unittest

from weatherpoll.config.runtime import PollerConfig, config_from_mapping, load_config


class PollerConfigTest(unittest.TestCase):
    def test_defaults(self):
        cfg = PollerConfig()
        self.assertEqual(cfg.poll_interval_s, 5.0)
        self.assertEqual(cfg.request_timeout_s, 10.0)
        self.assertEqual(cfg.buffer_capacity, 300)
        self.assertEqual(cfg.temperature_range, (20.0, 45.0))
        self.assertEqual(cfg.humidity_range, (10.0, 70.0))
        self.assertEqual(cfg.pressure_half_span, 50.0)

    def test_mapping_with_poller_block_and_unknown_keys(self):
        cfg = config_from_mapping(
            {"poller": {"poll_interval_s": 1, "buffer_capacity": 50}, "colour": "blue"}
        )
        self.assertEqual(cfg.poll_interval_s, 1.0)
        self.assertEqual(cfg.buffer_capacity, 50)

    def test_empty_mapping_gives_defaults(self):
        self.assertEqual(config_from_mapping(None), PollerConfig())

    def test_sanitized_clamps_and_falls_back(self):
        cfg = PollerConfig(
            poll_interval_s=-1,
            buffer_capacity=0,
            temperature_range=(50, 10),
            humidity_range=[0, 100],
            output_root="  ",
        ).sanitized()
        self.assertGreater(cfg.poll_interval_s, 0)
        self.assertEqual(cfg.buffer_capacity, 1)
        self.assertEqual(cfg.temperature_range, (20.0, 45.0))
        self.assertEqual(cfg.humidity_range, (0.0, 100.0))
        self.assertIsNone(cfg.output_root)

    def test_load_yaml_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "poller.yaml"
            path.write_text(
                "poll_interval_s: 2.5\ntemperature_range: [15, 35]\noutput_root: /data\n",
                encoding="utf-8",
            )
            cfg = load_config(path)
        self.assertEqual(cfg.poll_interval_s, 2.5)
        self.assertEqual(cfg.temperature_range, (15.0, 35.0))
        self.assertEqual(cfg.output_root, "/data")

    def test_missing_file_gives_defaults(self):
        self.assertEqual(load_config("/nonexistent/poller.yaml"), PollerConfig())
        self.assertEqual(load_config(None), PollerConfig())

    def test_non_mapping_yaml_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "bad.yaml"
            path.write_text("- 1\n- 2\n", encoding="utf-8")
            with self.assertLogs("weatherpoll.config.runtime", level="WARNING"):
                cfg = load_config(path)
        self.assertEqual(cfg, PollerConfig())

    def test_malformed_yaml_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "broken.yaml"
            path.write_text("poll_interval_s: [1\n", encoding="utf-8")
            with self.assertLogs("weatherpoll.config.runtime", level="WARNING"):
                cfg = load_config(path)
        self.assertEqual(cfg, PollerConfig())

    def test_non_numeric_values_fall_back_per_field(self):
        with self.assertLogs("weatherpoll.config.runtime", level="WARNING"):
            cfg = config_from_mapping(
                {"poll_interval_s": [1, 2], "buffer_capacity": "many", "image_dpi": 150}
            )
        self.assertEqual(cfg.poll_interval_s, 5.0)
        self.assertEqual(cfg.buffer_capacity, 300)
        self.assertEqual(cfg.image_dpi, 150)


if __name__ == "__main__":
    unittest.main()
