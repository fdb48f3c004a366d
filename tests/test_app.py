"""Tests for the Qt tick driver and the headless runner's settings.

Covers: tt.app
"""

import os
import tempfile
import unittest

os.environ.setdefault("TT_DATA_DIR", tempfile.mkdtemp(prefix="tt_test_"))


class _FakeTime:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestMatchDriver(unittest.TestCase):
    """Tests for MatchDriver signal emission."""

    @classmethod
    def setUpClass(cls):
        from PySide6.QtCore import QCoreApplication
        cls.app = QCoreApplication.instance() or QCoreApplication([])

    def setUp(self):
        from tt.app import MatchDriver
        from tt.core.session import TournamentSession
        self.fake = _FakeTime(0.0)
        self.driver = MatchDriver(TournamentSession(time_source=self.fake))
        self.views = []
        self.rounds = []
        self.overs = []
        self.resets = []
        self.driver.ticked.connect(self.views.append)
        self.driver.roundStarted.connect(self.rounds.append)
        self.driver.matchOver.connect(lambda: self.overs.append(True))
        self.driver.gameReset.connect(lambda: self.resets.append(True))

    def tearDown(self):
        self.driver.detach()

    def test_start_ticks_immediately(self):
        self.driver.start()
        self.assertEqual(len(self.views), 1)
        self.assertTrue(self.views[-1].running)
        self.assertIs(self.driver.last_view, self.views[-1])

    def test_round_and_match_signals_fire_once(self):
        self.driver.start()
        self.fake.now = 600.0
        self.driver._tick()
        self.driver._tick()
        self.assertEqual(self.rounds, [2])
        self.fake.now = 1200.0
        self.driver._tick()
        self.assertEqual(self.rounds, [2, 3])
        self.fake.now = 1800.0
        self.driver._tick()
        self.fake.now = 1810.0
        self.driver._tick()
        self.assertEqual(self.overs, [True])
        self.assertFalse(self.driver.last_view.running)

    def test_pause_and_restart(self):
        self.driver.start()
        self.fake.now = 100.0
        self.driver.pause()
        self.assertFalse(self.views[-1].running)
        self.driver.restart()
        self.assertEqual(self.views[-1].overall_fraction, 0.0)
        self.assertFalse(self.views[-1].has_game_started)

    def test_reset_emits_game_reset(self):
        self.driver.update_settings(rounds=6)
        self.driver.reset_to_defaults()
        self.assertEqual(self.resets, [True])
        self.assertEqual(self.driver.session.settings.rounds, 3)

    def test_update_settings_reports_restart(self):
        self.driver.start()
        self.assertTrue(self.driver.update_settings(starting_bid=20))
        self.assertEqual(self.views[-1].small_bid, 20)
        self.assertFalse(self.views[-1].running)
        self.assertFalse(self.driver.update_settings(chip_denomination=25))
        self.assertEqual(self.views[-1].small_bid, 25)

    def test_attach_and_detach(self):
        self.driver.attach()
        self.assertTrue(self.driver._timer.isActive())
        self.assertEqual(self.driver._timer.interval(), 25)
        self.driver.detach()
        self.assertFalse(self.driver._timer.isActive())


class TestSettingsFromEnv(unittest.TestCase):
    """Tests for the TT_* environment overrides."""

    def test_overrides_applied(self):
        from tt.app import settings_from_env
        s = settings_from_env({"TT_MATCH_TIME": "45", "TT_ROUNDS": "5", "TT_ROUND_EXPONENT": "1.2"})
        self.assertEqual(s.match_time, 45)
        self.assertEqual(s.rounds, 5)
        self.assertEqual(s.round_exponent, 1.2)

    def test_unparseable_values_fall_back(self):
        from tt.app import settings_from_env
        s = settings_from_env({"TT_BID_MULTIPLIER": "lots", "TT_ROUNDS": " ", "TT_CHIP_DENOMINATION": "2.5"})
        self.assertEqual(s.bid_multiplier, 2)
        self.assertEqual(s.rounds, 3)
        self.assertEqual(s.chip_denomination, 10)

    def test_empty_environment_is_defaults(self):
        from tt.app import settings_from_env
        from tt.core.config import default_settings
        self.assertEqual(settings_from_env({}), default_settings())


if __name__ == "__main__":
    unittest.main()
