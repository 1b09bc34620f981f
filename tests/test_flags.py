import os
import unittest
from unittest import mock

from chaindom import flags


class TestEnvironmentParsing(unittest.TestCase):
    def test_bool_values(self):
        with mock.patch.dict(os.environ, {"CHAINDOM_X": "Yes"}):
            assert flags._env_bool("CHAINDOM_X") is True
        with mock.patch.dict(os.environ, {"CHAINDOM_X": "0"}):
            assert flags._env_bool("CHAINDOM_X", default=True) is False
        with mock.patch.dict(os.environ, {}, clear=True):
            assert flags._env_bool("CHAINDOM_X", default=True) is True

    def test_int_values(self):
        with mock.patch.dict(os.environ, {"CHAINDOM_N": "4"}):
            assert flags._env_int("CHAINDOM_N", 2) == 4
        with mock.patch.dict(os.environ, {"CHAINDOM_N": "wide"}):
            assert flags._env_int("CHAINDOM_N", 2) == 2
        with mock.patch.dict(os.environ, {}, clear=True):
            assert flags._env_int("CHAINDOM_N", 2) == 2

    def test_debug_logging_of_structural_calls(self):
        from chaindom import build

        saved = flags.DEBUG
        flags.DEBUG = True
        try:
            with self.assertLogs("chaindom.chain", level="DEBUG") as logs:
                build("root").down("a").next("b")
        finally:
            flags.DEBUG = saved
        assert any(line.startswith("DEBUG:chaindom.chain:down:") for line in logs.output)
        assert any(line.startswith("DEBUG:chaindom.chain:next:") for line in logs.output)


if __name__ == "__main__":
    unittest.main()
