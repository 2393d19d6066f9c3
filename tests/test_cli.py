"""Tests for the fermentradar command line."""

import json

import pytest
from click.testing import CliRunner

from fermentradar.cli import main
from fermentradar.locations import FRIDGE, COUNTER
from fermentradar.store import FermentStore

from tests.conftest import T0


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def store_dir(tmp_path):
    return str(tmp_path / "store")


def invoke(runner, store_dir, *args):
    return runner.invoke(main, ["--store", store_dir, *args])


class TestAdd:
    def test_add(self, runner, store_dir):
        result = invoke(runner, store_dir, "add", "Berlin wholemeal")
        assert result.exit_code == 0, result.output
        assert "Added Berlin wholemeal" in result.output
        (ferment,) = FermentStore(store_dir).list_ferments()
        assert ferment.base_feed_interval_hours == 16.0

    def test_add_options(self, runner, store_dir):
        result = invoke(runner, store_dir, "add", "Scoby", "--type", "kombucha",
                        "--location", "fridge", "--interval", "72")
        assert result.exit_code == 0, result.output
        (ferment,) = FermentStore(store_dir).list_ferments()
        assert ferment.type == "kombucha"
        assert ferment.storage_location == FRIDGE
        assert ferment.base_feed_interval_hours == 72.0

    def test_add_bad_interval(self, runner, store_dir):
        result = invoke(runner, store_dir, "add", "x", "--interval", "0")
        assert result.exit_code == 1
        assert "positive" in result.output

    @pytest.mark.parametrize("interval", ["nan", "inf"])
    def test_add_non_finite_interval(self, runner, store_dir, interval):
        result = invoke(runner, store_dir, "add", "x", "--interval", interval)
        assert result.exit_code == 1
        assert "positive" in result.output
        assert FermentStore(store_dir).list_ferments() == []

    def test_status_json_is_strict_json(self, runner, store_dir):
        invoke(runner, store_dir, "add", "x", "--interval", "1e-307")
        result = invoke(runner, store_dir, "status", "--json")
        assert result.exit_code == 0, result.output
        (row,) = json.loads(result.output, parse_constant=pytest.fail)
        assert row["label"] in ("happy", "needs_feed")

    def test_env_store(self, runner, store_dir):
        result = runner.invoke(main, ["add", "env"], env={"FERMENTRADAR_STORE": store_dir})
        assert result.exit_code == 0, result.output
        assert FermentStore(store_dir).list_ferments()[0].name == "env"


class TestFeedAndMove:
    def test_move_toggles(self, runner, store_dir):
        ferment = FermentStore(store_dir).add("starter", T0)
        result = invoke(runner, store_dir, "move", ferment.id[:8])
        assert result.exit_code == 0, result.output
        assert "fridge" in result.output
        assert FermentStore(store_dir).get(ferment.id).storage_location == FRIDGE

        invoke(runner, store_dir, "move", ferment.id)
        assert FermentStore(store_dir).get(ferment.id).storage_location == COUNTER

    def test_move_to(self, runner, store_dir):
        ferment = FermentStore(store_dir).add("starter", T0)
        result = invoke(runner, store_dir, "move", ferment.id, "--to", "counter")
        assert result.exit_code == 0, result.output
        assert FermentStore(store_dir).events()[0].new_location == COUNTER

    def test_feed(self, runner, store_dir):
        ferment = FermentStore(store_dir).add("starter", T0)
        result = invoke(runner, store_dir, "feed", ferment.id)
        assert result.exit_code == 0, result.output
        assert "Fed starter" in result.output
        assert FermentStore(store_dir).get(ferment.id).last_fed_at != ferment.last_fed_at

    @pytest.mark.parametrize("command", ["feed", "move", "timeline"])
    def test_unknown_id(self, runner, store_dir, command):
        result = invoke(runner, store_dir, command, "nope")
        assert result.exit_code == 1
        assert "nope" in result.output


class TestStatus:
    def test_empty(self, runner, store_dir):
        result = invoke(runner, store_dir, "status")
        assert result.exit_code == 0
        assert "No ferments yet." in result.output

    def test_lists_with_label(self, runner, store_dir):
        FermentStore(store_dir).add("starter", T0)
        result = invoke(runner, store_dir, "status", "--at", "2024-03-02T00:00:00")
        assert result.exit_code == 0, result.output
        assert "starter" in result.output
        assert "needs_feed (100%)" in result.output
        assert "Next move: fridge" in result.output

    def test_json(self, runner, store_dir):
        FermentStore(store_dir).add("starter", T0)
        result = invoke(runner, store_dir, "status", "--json", "--at", "2024-03-01T16:00:00")
        assert result.exit_code == 0, result.output
        (row,) = json.loads(result.output)
        assert row["label"] == "happy"
        assert row["percent"] == 50


class TestTimeline:
    def test_timeline(self, runner, store_dir):
        ferment = FermentStore(store_dir).add("starter", T0)
        result = invoke(runner, store_dir, "timeline", ferment.id,
                        "--hours", "16", "--step", "4")
        assert result.exit_code == 0, result.output
        lines = [line for line in result.output.splitlines() if line.strip().startswith("+")]
        assert len(lines) == 5
        assert "happy" in lines[0]
        assert "needs_feed" in lines[-1]

    def test_bad_step(self, runner, store_dir):
        ferment = FermentStore(store_dir).add("starter", T0)
        result = invoke(runner, store_dir, "timeline", ferment.id, "--step", "0")
        assert result.exit_code == 1
