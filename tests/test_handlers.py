"""Test console and file logging handlers."""
from outpost.core.bunch import ResourceKind
from outpost.core.events import (
    ConsumeResource,
    EventBus,
    GameOverEvent,
    ProduceResource,
    ShipMove,
    ShipStrandedEvent,
)
from outpost.core.handlers import LoggerHandler, TurnLogHandler, describe_action
from outpost.main import Game


class TestDescribeAction:
    """Tests for action descriptions."""

    def test_consume(self):
        action = ConsumeResource(source=2, target=2, kind=ResourceKind.FOOD, amount=6, delta=-1)
        assert describe_action(action) == "node 2 -> node 2: Food -1 (left 6)"

    def test_produce(self):
        action = ProduceResource(source=0, target=4, kind=ResourceKind.POWER, amount=3, delta=3)
        assert describe_action(action) == "node 0 -> node 4: Power +3 (now 3)"

    def test_ship_move(self):
        assert describe_action(ShipMove(from_group=1, to_group=2)) == "ship 1 -> 2"


class TestLoggerHandler:
    """Tests for console output."""

    def test_turn_summary(self, capsys):
        game = Game()
        game.setup()
        game.end_turn()
        out = capsys.readouterr().out
        assert "[TURN] Turn 1 resolved with 4 actions (playing)" in out
        assert "[ACTION]" not in out

    def test_verbose_prints_actions(self, capsys):
        game = Game(verbose=True)
        game.setup()
        game.end_turn()
        game.playback.skip()
        out = capsys.readouterr().out
        assert "[ACTION] node 0 -> node 4: Power +3 (now 3)" in out

    def test_verbose_prints_ignored_end_turn(self, capsys):
        game = Game(verbose=True)
        game.setup()
        game.end_turn()
        game.end_turn()
        assert "[TURN] End turn ignored (busy)" in capsys.readouterr().out

    def test_game_over_and_stranded(self, capsys):
        bus = EventBus()
        LoggerHandler(bus)
        bus.publish(GameOverEvent(status="lost", turn=7))
        bus.publish(ShipStrandedEvent(home_group=0, destination=3))
        out = capsys.readouterr().out
        assert "[GAME] Run lost on turn 7" in out
        assert "[SHIP] Not enough fuel to reach sector 3" in out


class TestTurnLogHandler:
    """Tests for the turn log history."""

    def test_logs_turn_events(self, game):
        game.end_turn()
        assert game.turn_log.logs == [
            "[RUN] SolarField at node 0",
            "[RUN] HydroponicsFarm at node 1",
            "[TURN] 1 resolved, 4 actions, playing",
        ]
        assert game.turn_log.get_recent_logs(1) == ["[TURN] 1 resolved, 4 actions, playing"]

    def test_logs_player_actions(self, game):
        game.build(7, "SolarField")
        game.transfer(3, 4)
        assert game.turn_log.logs == [
            "[BUILD] SolarField at node 7",
            "[MOVE] 3 RocketFuel node 3 -> 4",
        ]

    def test_log_file_is_appended(self, tmp_path):
        log_file = tmp_path / "turns.log"
        game = Game(log_file=str(log_file))
        game.setup()
        game.end_turn()
        lines = log_file.read_text().splitlines()
        assert lines[-1] == "[TURN] 1 resolved, 4 actions, playing"
        assert len(lines) == 3

    def test_save_logs(self, game, tmp_path):
        game.demolish(0)
        target = tmp_path / "saved.log"
        game.turn_log.save_logs(str(target))
        assert target.read_text() == "[DEMOLISH] SolarField at node 0\n"

    def test_standalone_handler(self):
        bus = EventBus()
        handler = TurnLogHandler(bus)
        bus.publish(GameOverEvent(status="won", turn=12))
        assert handler.logs == ["[GAME] won on turn 12"]
