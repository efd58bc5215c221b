import json

from predpreyshelter.main import main, parse_arguments


def test_parse_arguments_defaults():
    args = parse_arguments([])

    assert args.settings is None
    assert args.render is False
    assert args.threaded is False


def test_main_runs_and_exports_settings(tmp_path):
    exit_code = main(["--steps", "3", "--seed", "1", "--quiet", "--log_every", "0", "--export_settings", str(tmp_path)])

    assert exit_code == 0
    exported = list(tmp_path.glob("simulation_settings_*.json"))
    assert len(exported) == 1
    assert json.loads(exported[0].read_text(encoding="utf-8"))["seed"] == 1


def test_main_threaded_run(tmp_path):
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(
        json.dumps({"map_size": 8, "rabbit_shelter_ids": [10], "timeout_between_simulation_steps": 0}),
        encoding="utf-8",
    )

    assert main(["--settings", str(settings_path), "--threaded", "--steps", "2", "--quiet"]) == 0


def test_main_rejects_bad_settings(tmp_path):
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"map_size": 3}), encoding="utf-8")

    assert main(["--settings", str(settings_path)]) == 2


def test_main_reports_unreadable_settings(tmp_path):
    assert main(["--settings", str(tmp_path / "absent.json")]) == 2


def test_main_applies_seed_to_loaded_settings(tmp_path):
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"map_size": 8, "seed": 1}), encoding="utf-8")
    out_dir = tmp_path / "out"

    exit_code = main(
        ["--settings", str(settings_path), "--seed", "9", "--steps", "1", "--quiet",
         "--export_settings", str(out_dir)]
    )

    assert exit_code == 0
    exported = next(out_dir.glob("simulation_settings_*.json"))
    data = json.loads(exported.read_text(encoding="utf-8"))
    assert data["seed"] == 9
    assert data["logs_enabled"] is False
