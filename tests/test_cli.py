import json

from click.testing import CliRunner

from gymovoo.cli import cli


def test_generate_command(tmp_path):
    answers = tmp_path / "answers.json"
    answers.write_text(json.dumps({"goal": "build_muscle", "experience_level": "intermediate",
                                   "location": "home_equipment", "equipment": ["dumbbells"],
                                   "sessions_per_week": 4, "session_duration_minutes": 45}))
    result = CliRunner().invoke(cli, ["generate", "--answers", str(answers), "--tier", "smart", "--verify"])
    assert result.exit_code == 0, result.output
    out = json.loads(result.stdout)
    assert list(out["plans"]) == ["smart"]
    assert len(out["plans"]["smart"]["sessions"]) == 4
    assert out["verification"]["smart"]["ok"]


def test_generate_invalid_answers_fails(tmp_path):
    answers = tmp_path / "answers.json"
    answers.write_text(json.dumps({"goal": "teleport"}))
    result = CliRunner().invoke(cli, ["generate", "--answers", str(answers)])
    assert result.exit_code != 0
    assert "goal" in result.output


def test_equipment_command():
    result = CliRunner().invoke(cli, ["equipment", "--location", "gym", "barbell", "cable_machine"])
    assert result.exit_code == 0
    assert "full_gym" in result.output
