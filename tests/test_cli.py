import json
from pathlib import Path

from typer.testing import CliRunner

from dog_match.cli import app

runner = CliRunner()


def _write(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _dog_file(tmp_path: Path) -> Path:
    return _write(
        tmp_path / "dog.json",
        {"id": "dog-1", "name": "Max", "breed": "Labrador Mix", "age": 3, "energy": "High", "isGoodOffLeash": True},
    )


def test_score_command(tmp_path: Path) -> None:
    event = _write(
        tmp_path / "event.json",
        {
            "id": "hike",
            "suitableEnergyLevels": ["Medium", "High"],
            "suitableDogSizes": ["Medium", "Large"],
            "minAge": 12,
            "requiredAbilities": ["OffLeash"],
        },
    )
    result = runner.invoke(app, ["score", str(_dog_file(tmp_path)), str(event)])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["score"] == 100
    assert payload["tier"] == "strong match"
    assert "Max has good off-leash control" in payload["reasons"]


def test_recommend_command(tmp_path: Path) -> None:
    candidates = _write(
        tmp_path / "candidates.json",
        [
            {"id": "walk"},
            {"id": "trial", "category": "Competition", "breedAllowList": ["Collie"]},
            {"type": "meetup", "id": "park", "tags": ["Large dog area"]},
        ],
    )
    result = runner.invoke(app, ["recommend", str(_dog_file(tmp_path)), str(candidates)])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert set(payload["buckets"]) == {"General", "DogPark"}
    assert [item["id"] for item in payload["all"]] == ["walk", "park"]

    only_parks = runner.invoke(app, ["recommend", str(_dog_file(tmp_path)), str(candidates), "--kind", "DogPark"])
    assert only_parks.exit_code == 0, only_parks.output
    assert list(json.loads(only_parks.output)["buckets"]) == ["DogPark"]

    strict = runner.invoke(app, ["recommend", str(_dog_file(tmp_path)), str(candidates), "--min-score", "60"])
    assert [item["id"] for item in json.loads(strict.output)["all"]] == ["walk"]


def test_estimate_size_command() -> None:
    result = runner.invoke(app, ["estimate-size", "Golden Retriever"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"breed": "Golden Retriever", "size": "Large"}


def test_bad_input_is_reported(tmp_path: Path) -> None:
    missing = tmp_path / "missing.json"
    result = runner.invoke(app, ["recommend", str(_dog_file(tmp_path)), str(missing)])
    assert result.exit_code != 0


def test_score_command_panel_and_disqualified_flag(tmp_path: Path) -> None:
    event = _write(tmp_path / "event.json", {"id": "hike", "suitableEnergyLevels": ["Medium", "High"], "requiredAbilities": ["OffLeash"]})
    panel = runner.invoke(app, ["score", str(_dog_file(tmp_path)), str(event), "--panel"])
    assert panel.exit_code == 0, panel.output
    payload = json.loads(panel.output)
    assert payload["score"] == 75
    assert payload["disqualified"] is False

    trial = _write(tmp_path / "trial.json", {"id": "trial", "category": "Competition", "breedAllowList": ["Collie"]})
    result = runner.invoke(app, ["score", str(_dog_file(tmp_path)), str(trial)])
    assert json.loads(result.output)["disqualified"] is True


def test_malformed_dog_is_a_usage_error(tmp_path: Path) -> None:
    dog = _write(tmp_path / "dog.json", {"id": "d", "preferredPlaymates": ["Small"]})
    event = _write(tmp_path / "event.json", {"id": "walk"})
    result = runner.invoke(app, ["score", str(dog), str(event)])
    assert result.exit_code == 2
    assert not isinstance(result.exception, AttributeError)
